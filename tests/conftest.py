"""
Pytest configuration and fixtures for affiliate widget tests.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add src to path for imports
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

import pytest
import requests

from affiliate_widget.catalog import InMemoryCatalog
from affiliate_widget.models import PipelineConfig, Product, Tag
from affiliate_widget.services.credentials import StaticCredentialProvider
from affiliate_widget.settings import DictSettingsStore


def chat_response(content, status_code=200):
    """Build a fake requests response carrying a chat completion."""
    response = MagicMock()
    response.status_code = status_code
    response.text = "" if status_code < 300 else "upstream error"
    response.json.return_value = {
        "choices": [{"message": {"role": "assistant", "content": content}}]
    }
    return response


@pytest.fixture
def make_response():
    return chat_response


@pytest.fixture
def session():
    """HTTP session double; tests set post.return_value or side_effect."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def pipeline_config():
    return PipelineConfig(model="gpt-4.1", prompt="Return shopping keywords as a JSON array.")


@pytest.fixture
def tags():
    return [
        Tag(id=1, name="yoga mat"),
        Tag(id=2, name="resistance band"),
        Tag(id=3, name="Running Shoes"),
        Tag(id=4, name="yoga mat", vocabulary="other_vocabulary"),
    ]


@pytest.fixture
def products():
    return [
        Product(id=10, tag_ids=frozenset({1}), published=True, title="Cork Yoga Mat"),
        Product(id=11, tag_ids=frozenset({3}), published=True, title="Trail Shoes"),
        Product(id=12, tag_ids=frozenset({1}), published=False, title="Draft Yoga Mat"),
        Product(id=13, tag_ids=frozenset({1}), published=True, product_type="page", title="Yoga Guide"),
        Product(id=100, published=True, title="Water Bottle"),
        Product(id=101, published=True, title="Foam Roller"),
        Product(id=102, published=False, title="Unpublished Pick"),
        Product(id=103, published=True, title="Yoga Blocks"),
        Product(id=104, published=True, title="Jump Rope"),
        Product(id=105, published=True, title="Kettlebell"),
        Product(id=106, published=True, title="Sixth Pick"),
    ]


@pytest.fixture
def catalog(tags, products):
    return InMemoryCatalog(tags=tags, products=products)


@pytest.fixture
def settings_store():
    return DictSettingsStore({
        "model": "gpt-4.1",
        "prompt": "Return shopping keywords as a JSON array.",
        "max_tokens": 256,
        "temperature": 0.3,
        "fallback_products": [100, 101],
    })


@pytest.fixture
def credentials():
    return StaticCredentialProvider({"openai_key": "sk-test"})
