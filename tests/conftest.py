"""Shared fixtures for the comparison tests."""

import json
from collections.abc import Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import LLMBackend, settings
from app.main import app
from app.schemas.product_search import Product


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point every backend at fake keys so nothing reads the real environment."""
    monkeypatch.setattr(settings, "llm_backend", LLMBackend.GEMINI)
    monkeypatch.setattr(settings, "gemini_api_key", "test-gemini-key")
    monkeypatch.setattr(settings, "anthropic_api_key", "test-anthropic-key")
    monkeypatch.setattr(settings, "openai_api_key", "test-openai-key")
    monkeypatch.setattr(settings, "exchange_rate_url", "https://rates.test/v4/latest")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


def gemini_body(text: str) -> dict:
    """Wrap model text the way the generateContent endpoint returns it."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def listing_json(*titles: str, price: str = "$10") -> str:
    return json.dumps([
        {"title": t, "price": price, "store": "Store", "link": f"https://shop.test/{i}"}
        for i, t in enumerate(titles)
    ])


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport from a handler and record every request it sees."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], seen: list | None = None):
        def _record(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            return handler(request)

        return httpx.MockTransport(_record)

    return _make


@pytest.fixture
def watch_products() -> tuple[list[Product], list[Product]]:
    home = [
        Product(title="Galaxy Watch 7", price="S$399.00", store="Challenger", link="https://sg.test/1"),
        Product(title="Galaxy Watch 7 LTE", price="S$469.00", store="Lazada SG", link="https://sg.test/2"),
    ]
    visiting = [
        Product(title="Samsung Galaxy Watch 7", price="RM1,299.00", store="Shopee", link="https://my.test/1"),
        Product(title="Galaxy Buds 3", price="RM599.00", store="Senheng", link="https://my.test/2"),
    ]
    return home, visiting
