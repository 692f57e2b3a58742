"""
Language-model keyword extraction for affiliate matching.

Sends the configured prompt and the article text to a chat completion
endpoint and expects a JSON array of keyword strings back. Every failure
is reported as a ``KeywordExtractionResult`` with a failure reason; nothing
is raised to the caller.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

import requests

from ..config import Config
from ..logger import get_logger
from ..models import FailureReason, KeywordExtractionResult, PipelineConfig

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


def parse_keywords(message_content: Any) -> Optional[List[str]]:
    """
    Parse model output into a keyword list.

    Returns None when the output is not a JSON array. Non-string and
    blank items are dropped.
    """
    if not isinstance(message_content, str) or not message_content.strip():
        return None

    text = message_content.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None

    if not isinstance(data, list):
        return None

    return [item for item in data if isinstance(item, str) and item.strip()]


class KeywordExtractor:
    """
    Extract shopping-intent keywords from article content.

    One POST per call, bounded by a timeout, never retried.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        api_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the keyword extractor.

        Args:
            session: HTTP session used for the request (a new one if omitted)
            api_url: Chat completion endpoint (default from config)
            timeout_s: Request timeout in seconds (default 60 from config)
            logger: Logger for failures (default module logger)
        """
        self.session = session or requests.Session()
        self.api_url = api_url or Config.OPENAI_API_URL
        self.timeout_s = timeout_s or Config.OPENAI_TIMEOUT_S
        self.logger = logger or get_logger(__name__)

    def extract_keywords(self, content: str, config: PipelineConfig, api_key: Optional[str]) -> List[str]:
        """Return the extracted keywords, or an empty list on any failure."""
        return self.extract(content, config, api_key).keywords

    def extract(self, content: str, config: PipelineConfig, api_key: Optional[str]) -> KeywordExtractionResult:
        """
        Ask the language model for keywords.

        Args:
            content: Article body
            config: Model settings snapshot
            api_key: Bearer token for the endpoint

        Returns:
            KeywordExtractionResult with keywords, or a failure reason
        """
        if not api_key:
            self.logger.warning("OpenAI key not found, skipping keyword extraction")
            return KeywordExtractionResult.failed(FailureReason.MISSING_CREDENTIAL, "OpenAI key not found")

        if not config.is_complete():
            self.logger.warning("Model or prompt not configured, skipping keyword extraction")
            return KeywordExtractionResult.failed(FailureReason.MISSING_CONFIG, "Model or prompt not configured")

        payload = self.build_payload(content, config)
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers=headers,
                timeout=self.timeout_s
            )
        except requests.exceptions.Timeout as e:
            self.logger.error(f"Keyword extraction timed out after {self.timeout_s}s: {e}")
            return KeywordExtractionResult.failed(FailureReason.TIMEOUT, str(e))
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Keyword extraction request failed: {e}")
            return KeywordExtractionResult.failed(FailureReason.TRANSPORT, str(e))

        if not 200 <= response.status_code < 300:
            detail = f"status={response.status_code}, response={response.text[:500]}"
            self.logger.error(f"Keyword extraction API error: {detail}")
            return KeywordExtractionResult.failed(FailureReason.HTTP_STATUS, detail)

        try:
            data = response.json()
            message_content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.logger.error(f"Keyword extraction returned a malformed response body: {e!r}")
            return KeywordExtractionResult.failed(FailureReason.MALFORMED_RESPONSE, repr(e))

        keywords = parse_keywords(message_content)
        if keywords is None:
            preview = str(message_content)[:200]
            self.logger.warning(f"Model output is not a JSON array of keywords: {preview!r}")
            return KeywordExtractionResult.failed(FailureReason.PARSE, preview)

        normalization = config.keyword_normalization
        keywords = [normalization.apply(k) for k in keywords]
        keywords = [k for k in keywords if k]

        self.logger.info(f"Extracted {len(keywords)} keywords: {keywords}")
        return KeywordExtractionResult(keywords=keywords)

    @staticmethod
    def build_payload(content: str, config: PipelineConfig) -> Dict[str, Any]:
        """Build the chat completion request body."""
        messages = [
            {"role": "system", "content": config.prompt},
            {"role": "user", "content": content}
        ]
        return {"messages": messages, **config.to_request_params()}
