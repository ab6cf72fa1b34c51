import logging

from fastapi import APIRouter, Request
from pydantic import ValidationError

from app.errors import MissingField
from app.schemas.comparison import CurrencyOut, ExchangeRateOut
from app.schemas.product_search import SearchRequest, SearchResponse
from app.services.currency import CURRENCIES, ExchangeRateService, get_currency
from app.services.product_search import ProductSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/search", response_model=SearchResponse)
async def search(request: Request):
    """Listings for one product in one country, as reported by the LLM."""
    try:
        body = SearchRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as exc:
        raise MissingField("Request body must be a JSON object with country and query") from exc

    if not body.country or not body.query:
        raise MissingField("country and query are required")

    products = await ProductSearchService().search_products(body.country, body.query)
    logger.info("Returning %d products", len(products))
    return SearchResponse(products=products)


@router.get("/exchange-rate", response_model=ExchangeRateOut)
async def exchange_rate(home_country: str = "", visiting_country: str = ""):
    rate = await ExchangeRateService().get_rate(home_country, visiting_country)
    return ExchangeRateOut(
        home_currency=get_currency(home_country).code,
        visiting_currency=get_currency(visiting_country).code,
        rate=rate,
    )


@router.get("/countries", response_model=list[CurrencyOut])
async def countries():
    return [
        CurrencyOut(country=country, code=currency.code, symbol=currency.symbol)
        for country, currency in CURRENCIES.items()
    ]
