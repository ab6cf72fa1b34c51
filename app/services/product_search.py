import logging

import anthropic
import httpx

from app.config import LLMBackend, settings
from app.errors import MalformedResponse, UpstreamUnavailable
from app.schemas.product_search import Product
from app.services.listing_extractor import extract_products

logger = logging.getLogger(__name__)

SEARCH_PROMPT = """Search for {query} prices in {country}. For each product, provide:
1. Product title
2. Price (in local currency)
3. Store name
4. Store URL
Format the response as a valid JSON array with exactly {count} results. Each result should be an object with these properties:
- title: string (product name)
- price: string (price with currency)
- store: string (store name)
- link: string (product URL)

Important: Ensure the response is a valid JSON array that can be parsed. Do not include any explanatory text before or after the JSON array."""


class ProductSearchService:
    """Ask the configured LLM for store listings of a product in one country."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.transport = transport

    async def search_products(self, country: str, query: str) -> list[Product]:
        prompt = SEARCH_PROMPT.format(
            query=query, country=country, count=settings.results_per_country
        )

        logger.info("Searching %s via %s for: %s", country, settings.llm_backend, query)
        if settings.llm_backend == LLMBackend.GEMINI:
            text = await self._complete_gemini(prompt)
        elif settings.llm_backend == LLMBackend.OPENAI:
            text = await self._complete_openai(prompt)
        else:
            text = await self._complete_anthropic(prompt)

        result = extract_products(text)
        if not result.ok:
            logger.error("Failed to parse product data for %s: %s", country, result.error)
        products = result.unwrap()

        logger.info("LLM returned %d products for %s in %s", len(products), query, country)
        return products

    async def _complete_anthropic(self, prompt: str) -> str:
        if not settings.anthropic_api_key:
            raise UpstreamUnavailable("ANTHROPIC_API_KEY is not set")

        try:
            async with anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key) as client:
                response = await client.messages.create(
                    model=settings.anthropic_model,
                    max_tokens=settings.anthropic_max_tokens,
                    messages=[{"role": "user", "content": prompt}],
                )
        except anthropic.APIError as exc:
            raise UpstreamUnavailable(f"Anthropic request failed: {exc}") from exc

        try:
            return response.content[0].text
        except (IndexError, AttributeError) as exc:
            raise MalformedResponse("Invalid response format from Anthropic API") from exc

    async def _complete_gemini(self, prompt: str) -> str:
        if not settings.gemini_api_key:
            raise UpstreamUnavailable("GEMINI_API_KEY is not set")

        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": settings.gemini_api_key,
        }
        url = f"{settings.gemini_base_url}/models/{settings.gemini_model}:generateContent"
        data = await self._post_json(url, payload, headers)

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise MalformedResponse("Invalid response format from Gemini API") from exc

    async def _complete_openai(self, prompt: str) -> str:
        payload = {
            "model": settings.openai_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.1,
        }

        headers = {"Content-Type": "application/json"}
        if settings.openai_api_key:
            headers["Authorization"] = f"Bearer {settings.openai_api_key}"

        data = await self._post_json(f"{settings.openai_url}/chat/completions", payload, headers)

        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise MalformedResponse("Invalid response format from chat completions API") from exc

    async def _post_json(self, url: str, payload: dict, headers: dict) -> dict:
        try:
            async with httpx.AsyncClient(timeout=settings.llm_timeout, transport=self.transport) as client:
                resp = await client.post(url, json=payload, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailable(
                f"LLM request failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"LLM request failed: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponse("LLM endpoint returned a non-JSON body") from exc
