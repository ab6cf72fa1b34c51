import logging
from dataclasses import dataclass, field

from app.config import settings
from app.errors import ComparisonError
from app.schemas.comparison import ComparisonRow
from app.schemas.product_search import Product
from app.services.comparator import compare, convert_price, format_converted, normalize
from app.services.currency import COUNTRIES, ExchangeRateService, currency_symbol
from app.services.dispatcher import QueryDispatcher

logger = logging.getLogger(__name__)


@dataclass
class CompareViewModel:
    product_name: str = ""
    home_country: str = ""
    visiting_country: str = ""
    countries: tuple[str, ...] = COUNTRIES
    exchange_rate: float | None = None
    home_results: list[Product] = field(default_factory=list)
    visiting_results: list[Product] = field(default_factory=list)
    rows: list[ComparisonRow] = field(default_factory=list)
    error: bool = False

    @property
    def home_symbol(self) -> str:
        return currency_symbol(self.home_country)

    @property
    def matched_rows(self) -> list[ComparisonRow]:
        return [row for row in self.rows if row.is_match]

    @property
    def has_matched_products(self) -> bool:
        return any(row.is_match for row in self.rows)

    @property
    def visiting_panel(self) -> list[tuple[Product, str | None]]:
        """Each visiting listing with its price converted into home currency, when a rate is known."""
        return [
            (product, format_converted(convert_price(listing, self.exchange_rate), self.home_symbol))
            for product, listing in zip(self.visiting_results, normalize(self.visiting_results))
        ]

    @property
    def has_results(self) -> bool:
        return bool(self.home_results or self.visiting_results)

    @classmethod
    def load(cls) -> "CompareViewModel":
        return cls(
            home_country=settings.default_home_country,
            visiting_country=settings.default_visiting_country,
        )

    @classmethod
    async def fetch_exchange_rate(
        cls,
        home_country: str,
        visiting_country: str,
        rate_service: ExchangeRateService | None = None,
    ) -> float | None:
        """Rate for the current selection, or None when it cannot be fetched."""
        rate_service = rate_service or ExchangeRateService()
        try:
            return await rate_service.get_rate(home_country, visiting_country)
        except ComparisonError:
            logger.exception("Error fetching exchange rate %s -> %s", home_country, visiting_country)
            return None

    @classmethod
    async def search(
        cls,
        product_name: str,
        home_country: str,
        visiting_country: str,
        exchange_rate: float | None = None,
        dispatcher: QueryDispatcher | None = None,
        rate_service: ExchangeRateService | None = None,
    ) -> "CompareViewModel":
        vm = cls(
            product_name=product_name,
            home_country=home_country,
            visiting_country=visiting_country,
            exchange_rate=exchange_rate,
        )
        if not product_name.strip():
            return vm

        if vm.exchange_rate is None:
            vm.exchange_rate = await cls.fetch_exchange_rate(home_country, visiting_country, rate_service)

        dispatcher = dispatcher or QueryDispatcher()
        try:
            vm.home_results, vm.visiting_results = await dispatcher.dispatch(
                product_name, home_country, visiting_country
            )
        except Exception:
            logger.exception("Error fetching results for %r", product_name)
            vm.home_results, vm.visiting_results = [], []
            vm.error = True

        vm.rows = compare(vm.home_results, vm.visiting_results, vm.exchange_rate, vm.home_symbol)
        return vm
