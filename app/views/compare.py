import math

from fastapi import APIRouter, Request

from app.services.currency import CURRENCIES
from app.viewmodels.compare_vm import CompareViewModel

router = APIRouter()


def _parse_rate(value: str) -> float | None:
    try:
        rate = float(value)
    except ValueError:
        return None
    return rate if math.isfinite(rate) and rate > 0 else None


@router.get("/")
async def compare_page(request: Request):
    vm = CompareViewModel.load()
    return request.app.state.templates.TemplateResponse(
        "compare/index.html",
        {"request": request, "vm": vm},
    )


@router.get("/compare")
async def compare_results(
    request: Request,
    product_name: str = "",
    home_country: str = "",
    visiting_country: str = "",
    exchange_rate: str = "",
):
    vm = await CompareViewModel.search(
        product_name,
        home_country,
        visiting_country,
        exchange_rate=_parse_rate(exchange_rate),
    )
    template = "compare/results.html" if request.headers.get("HX-Request") else "compare/index.html"
    return request.app.state.templates.TemplateResponse(
        template,
        {"request": request, "vm": vm},
    )


@router.get("/exchange-rate")
async def exchange_rate_partial(request: Request, home_country: str = "", visiting_country: str = ""):
    """HTMX partial swapped in whenever either country select changes."""
    home = CURRENCIES.get(home_country)
    visiting = CURRENCIES.get(visiting_country)
    rate = None
    if home and visiting:
        rate = await CompareViewModel.fetch_exchange_rate(home_country, visiting_country)
    return request.app.state.templates.TemplateResponse(
        "compare/exchange_rate.html",
        {"request": request, "rate": rate, "home": home, "visiting": visiting},
    )
