import logging
from types import MappingProxyType
from typing import NamedTuple

import httpx

from app.config import settings
from app.errors import MissingField, UpstreamUnavailable

logger = logging.getLogger(__name__)


class Currency(NamedTuple):
    code: str
    symbol: str


CURRENCIES: MappingProxyType[str, Currency] = MappingProxyType({
    "Singapore": Currency("SGD", "S$"),
    "Malaysia": Currency("MYR", "RM"),
    "Indonesia": Currency("IDR", "Rp"),
    "Thailand": Currency("THB", "฿"),
    "Vietnam": Currency("VND", "₫"),
    "Philippines": Currency("PHP", "₱"),
    "United States": Currency("USD", "$"),
    "United Kingdom": Currency("GBP", "£"),
    "European Union": Currency("EUR", "€"),
    "Japan": Currency("JPY", "¥"),
    "Australia": Currency("AUD", "A$"),
    "Canada": Currency("CAD", "C$"),
})

COUNTRIES: tuple[str, ...] = tuple(CURRENCIES)


def get_currency(country: str) -> Currency:
    try:
        return CURRENCIES[country]
    except KeyError:
        raise MissingField(f"Unsupported country: {country!r}") from None


def currency_symbol(country: str) -> str:
    currency = CURRENCIES.get(country)
    return currency.symbol if currency else ""


class ExchangeRateService:
    """Look up how many units of the visiting currency one unit of home currency buys."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = settings.exchange_rate_url.rstrip("/")
        self.transport = transport

    async def get_rate(self, home_country: str, visiting_country: str) -> float:
        source = get_currency(home_country).code
        target = get_currency(visiting_country).code
        if source == target:
            return 1.0

        try:
            async with httpx.AsyncClient(
                timeout=settings.exchange_rate_timeout, transport=self.transport
            ) as client:
                resp = await client.get(f"{self.base_url}/{source}")
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamUnavailable(f"Exchange rate lookup for {source} failed: {exc}") from exc

        rates = data.get("rates") if isinstance(data, dict) else None
        rate = rates.get(target) if isinstance(rates, dict) else None
        if not isinstance(rate, (int, float)) or isinstance(rate, bool) or rate <= 0:
            raise UpstreamUnavailable(f"No {target} rate in exchange rate response for {source}")

        logger.info("Exchange rate %s->%s: %s", source, target, rate)
        return float(rate)
