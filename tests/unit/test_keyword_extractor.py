"""
Unit tests for language-model keyword extraction.

Tests:
- Request payload, headers and timeout
- Parsing of model output
- Soft failures for transport and parse errors
"""
import pytest
import requests

from affiliate_widget.models import FailureReason, KeywordNormalization, PipelineConfig
from affiliate_widget.services.keyword_extractor import KeywordExtractor, parse_keywords


class TestRequest:
    """Tests for the outbound chat completion request."""

    @pytest.fixture
    def extractor(self, session, mock_logger):
        return KeywordExtractor(
            session=session,
            api_url="https://api.openai.com/v1/chat/completions",
            timeout_s=60,
            logger=mock_logger,
        )

    def test_sends_prompt_and_content_as_two_messages(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('["yoga mat"]')

        extractor.extract_keywords("Stretching every day.", pipeline_config, "sk-test")

        payload = session.post.call_args.kwargs["json"]
        assert payload["messages"] == [
            {"role": "system", "content": pipeline_config.prompt},
            {"role": "user", "content": "Stretching every day."},
        ]

    def test_sends_sampling_parameters(self, extractor, session, make_response):
        config = PipelineConfig(
            model="gpt-4",
            prompt="p",
            max_tokens=512,
            temperature=0.7,
            frequency_penalty=0.5,
            presence_penalty=1.5,
        )
        session.post.return_value = make_response("[]")

        extractor.extract_keywords("text", config, "sk-test")

        payload = session.post.call_args.kwargs["json"]
        assert payload["model"] == "gpt-4"
        assert payload["max_tokens"] == 512
        assert payload["temperature"] == 0.7
        assert payload["frequency_penalty"] == 0.5
        assert payload["presence_penalty"] == 1.5

    def test_sends_bearer_token_and_timeout(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response("[]")

        extractor.extract_keywords("text", pipeline_config, "sk-test")

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.openai.com/v1/chat/completions"
        assert kwargs["headers"] == {
            "Authorization": "Bearer sk-test",
            "Content-Type": "application/json",
        }
        assert kwargs["timeout"] == 60

    def test_missing_key_skips_network(self, extractor, session, pipeline_config):
        result = extractor.extract("text", pipeline_config, None)

        assert result.keywords == []
        assert result.failure is FailureReason.MISSING_CREDENTIAL
        session.post.assert_not_called()

    def test_missing_prompt_skips_network(self, extractor, session):
        config = PipelineConfig(model="gpt-4.1", prompt="   ")

        result = extractor.extract("text", config, "sk-test")

        assert result.failure is FailureReason.MISSING_CONFIG
        session.post.assert_not_called()


class TestResponseParsing:
    """Tests for turning model output into keywords."""

    @pytest.fixture
    def extractor(self, session, mock_logger):
        return KeywordExtractor(session=session, timeout_s=60, logger=mock_logger)

    def test_returns_keyword_array(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('["yoga mat", "resistance band"]')

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.success
        assert result.keywords == ["yoga mat", "resistance band"]

    def test_keeps_duplicates_and_order(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('["b", "a", "b"]')

        assert extractor.extract_keywords("text", pipeline_config, "sk-test") == ["b", "a", "b"]

    def test_unwraps_code_fence(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('```json\n["yoga mat"]\n```')

        assert extractor.extract_keywords("text", pipeline_config, "sk-test") == ["yoga mat"]

    def test_malformed_json_is_empty(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response("yoga mat, resistance band")

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.keywords == []
        assert result.failure is FailureReason.PARSE

    def test_json_object_is_empty(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('{"keywords": ["yoga mat"]}')

        assert extractor.extract_keywords("text", pipeline_config, "sk-test") == []

    def test_empty_content_is_empty(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response("")

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.keywords == []
        assert result.failure is FailureReason.PARSE

    def test_missing_choices_is_malformed(self, extractor, session, pipeline_config, make_response):
        response = make_response("[]")
        response.json.return_value = {"error": "nope"}
        session.post.return_value = response

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.keywords == []
        assert result.failure is FailureReason.MALFORMED_RESPONSE

    def test_non_json_body_is_malformed(self, extractor, session, pipeline_config, make_response):
        response = make_response("[]")
        response.json.side_effect = ValueError("not json")
        session.post.return_value = response

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.failure is FailureReason.MALFORMED_RESPONSE

    def test_drops_non_string_items(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('["yoga mat", 3, null, "  ", "band"]')

        assert extractor.extract_keywords("text", pipeline_config, "sk-test") == ["yoga mat", "band"]

    def test_lower_normalization(self, extractor, session, make_response):
        config = PipelineConfig(model="m", prompt="p", keyword_normalization=KeywordNormalization.LOWER)
        session.post.return_value = make_response('["  Yoga   Mat ", "BAND"]')

        assert extractor.extract_keywords("text", config, "sk-test") == ["yoga mat", "band"]

    def test_no_normalization_by_default(self, extractor, session, pipeline_config, make_response):
        session.post.return_value = make_response('["  Yoga Mat "]')

        assert extractor.extract_keywords("text", pipeline_config, "sk-test") == ["  Yoga Mat "]


class TestTransportFailures:
    """Transport failures degrade to no keywords and log one error."""

    @pytest.fixture
    def extractor(self, session, mock_logger):
        return KeywordExtractor(session=session, timeout_s=60, logger=mock_logger)

    def test_timeout(self, extractor, session, pipeline_config, mock_logger):
        session.post.side_effect = requests.exceptions.ReadTimeout("read timed out")

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.keywords == []
        assert result.failure is FailureReason.TIMEOUT
        assert mock_logger.error.call_count == 1
        session.post.assert_called_once()

    def test_connection_error(self, extractor, session, pipeline_config, mock_logger):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.failure is FailureReason.TRANSPORT
        assert "refused" in result.detail
        assert mock_logger.error.call_count == 1

    @pytest.mark.parametrize("status_code", [401, 429, 500])
    def test_non_success_status(self, extractor, session, pipeline_config, mock_logger, make_response, status_code):
        session.post.return_value = make_response('["yoga mat"]', status_code=status_code)

        result = extractor.extract("text", pipeline_config, "sk-test")

        assert result.keywords == []
        assert result.failure is FailureReason.HTTP_STATUS
        assert mock_logger.error.call_count == 1


class TestParseKeywords:
    """Tests for the standalone parser."""

    def test_rejects_non_string(self):
        assert parse_keywords(None) is None
        assert parse_keywords(["already", "a", "list"]) is None

    def test_empty_array(self):
        assert parse_keywords("[]") == []
