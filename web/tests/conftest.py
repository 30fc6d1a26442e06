"""Shared test fixtures for the web API test suite."""

import pytest

from godseye.models import ExtractionResult, Feature, ProductInfo, TokenUsage
from godseye.token_usage import clear_analysis


@pytest.fixture
def client(monkeypatch):
    """Create Flask test client with auth disabled."""
    monkeypatch.delenv("DEMO_USER", raising=False)
    monkeypatch.delenv("DEMO_PASS", raising=False)
    monkeypatch.delenv("GODSEYE_TRACE_DIR", raising=False)

    from web.app import app
    app.config["TESTING"] = True

    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def extraction_result():
    """A successful extraction as the extractor would return it."""
    return ExtractionResult(
        json_data=ProductInfo(
            product_name="Acme Widget",
            description="A great widget for everyone",
            features=[Feature(name="Sturdy", description="Survives drops")],
        ),
        extraction_method="meta-fallback",
        raw_response='{"product_name": "Acme Widget"}',
        missing_fields=[
            "general_product_type",
            "specific_product_type",
            "targeted_market",
            "problem_product_is_solving",
            "specifications",
        ],
        token_usage=TokenUsage(input_tokens=100, output_tokens=25, total_tokens=125),
    )


@pytest.fixture
def analysis_id():
    """Analysis id whose token usage is cleared after the test."""
    aid = "test-analysis-1"
    yield aid
    clear_analysis(aid)
