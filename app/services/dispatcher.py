import asyncio
import logging

from app.schemas.product_search import Product
from app.services.product_search import ProductSearchService

logger = logging.getLogger(__name__)


class QueryDispatcher:
    """Run the home and visiting country searches side by side."""

    def __init__(self, search_service: ProductSearchService | None = None):
        self.search_service = search_service or ProductSearchService()

    async def dispatch(
        self, product_query: str, home_country: str, visiting_country: str
    ) -> tuple[list[Product], list[Product]]:
        """Return (home_products, visiting_products); either search failing fails both."""
        home_task = asyncio.ensure_future(
            self.search_service.search_products(home_country, product_query)
        )
        visiting_task = asyncio.ensure_future(
            self.search_service.search_products(visiting_country, product_query)
        )
        try:
            home, visiting = await asyncio.gather(home_task, visiting_task)
        except Exception:
            for task in (home_task, visiting_task):
                task.cancel()
            raise

        logger.info(
            "Dispatch for %r: %d results in %s, %d in %s",
            product_query, len(home), home_country, len(visiting), visiting_country,
        )
        return home, visiting
