"""Tests for CompareViewModel state handling."""

from unittest.mock import AsyncMock

import pytest

from app.errors import UpstreamUnavailable
from app.viewmodels.compare_vm import CompareViewModel

pytestmark = pytest.mark.asyncio


def _dispatcher(result=None, error=None) -> AsyncMock:
    dispatcher = AsyncMock()
    if error is not None:
        dispatcher.dispatch.side_effect = error
    else:
        dispatcher.dispatch.return_value = result
    return dispatcher


def _rates(rate=None, error=None) -> AsyncMock:
    service = AsyncMock()
    if error is not None:
        service.get_rate.side_effect = error
    else:
        service.get_rate.return_value = rate
    return service


async def test_load_uses_default_countries():
    vm = CompareViewModel.load()
    assert vm.home_country == "Singapore"
    assert vm.visiting_country == "Malaysia"
    assert not vm.has_results


async def test_search_builds_rows(watch_products):
    rates = _rates()
    vm = await CompareViewModel.search(
        "Galaxy Watch 7", "Singapore", "Malaysia",
        exchange_rate=3.3,
        dispatcher=_dispatcher(watch_products),
        rate_service=rates,
    )

    assert not vm.error
    assert vm.has_results
    assert vm.has_matched_products
    assert len(vm.matched_rows) == 1
    assert vm.matched_rows[0].converted_display == "S$393.64"
    rates.get_rate.assert_not_awaited()


async def test_search_fetches_rate_when_missing(watch_products):
    rates = _rates(rate=3.3)
    vm = await CompareViewModel.search(
        "Galaxy Watch 7", "Singapore", "Malaysia",
        dispatcher=_dispatcher(watch_products),
        rate_service=rates,
    )

    assert vm.exchange_rate == 3.3
    rates.get_rate.assert_awaited_once_with("Singapore", "Malaysia")


async def test_rate_failure_only_drops_conversion(watch_products):
    vm = await CompareViewModel.search(
        "Galaxy Watch 7", "Singapore", "Malaysia",
        dispatcher=_dispatcher(watch_products),
        rate_service=_rates(error=UpstreamUnavailable("rates down")),
    )

    assert vm.exchange_rate is None
    assert vm.has_matched_products
    assert vm.matched_rows[0].converted_display is None


async def test_dispatch_failure_clears_both_panels():
    vm = await CompareViewModel.search(
        "Galaxy Watch 7", "Singapore", "Malaysia",
        exchange_rate=3.3,
        dispatcher=_dispatcher(error=UpstreamUnavailable("visiting search failed")),
    )

    assert vm.home_results == []
    assert vm.visiting_results == []
    assert vm.rows == []
    assert vm.error


async def test_blank_product_skips_dispatch():
    dispatcher = _dispatcher(([], []))
    vm = await CompareViewModel.search("  ", "Singapore", "Malaysia", dispatcher=dispatcher)

    dispatcher.dispatch.assert_not_awaited()
    assert not vm.has_results


async def test_visiting_panel_converts_every_listing(watch_products):
    vm = await CompareViewModel.search(
        "Galaxy Watch 7", "Singapore", "Malaysia",
        exchange_rate=3.3,
        dispatcher=_dispatcher(watch_products),
    )

    panel = vm.visiting_panel
    assert [product.title for product, _ in panel] == ["Samsung Galaxy Watch 7", "Galaxy Buds 3"]
    assert [converted for _, converted in panel] == ["S$393.64", "S$181.52"]


async def test_visiting_panel_without_rate(watch_products):
    vm = await CompareViewModel.search(
        "Galaxy Watch 7", "Singapore", "Malaysia",
        dispatcher=_dispatcher(watch_products),
        rate_service=_rates(error=UpstreamUnavailable("rates down")),
    )

    assert [converted for _, converted in vm.visiting_panel] == [None, None]
