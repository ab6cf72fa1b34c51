from pydantic import BaseModel

from app.schemas.product_search import Product


class NormalizedListing(Product):
    numeric_price: float = 0.0


class MatchedPair(BaseModel):
    home: NormalizedListing | None = None
    visiting: NormalizedListing | None = None

    @property
    def is_match(self) -> bool:
        return self.home is not None and self.visiting is not None


class ComparisonRow(BaseModel):
    home: NormalizedListing | None = None
    visiting: NormalizedListing | None = None
    converted_price: float | None = None  # visiting price in home currency, unrounded
    converted_display: str | None = None  # e.g. "S$12.34"
    home_cheaper: bool = False
    visiting_cheaper: bool = False

    @property
    def is_match(self) -> bool:
        return self.home is not None and self.visiting is not None


class CurrencyOut(BaseModel):
    country: str
    code: str
    symbol: str


class ExchangeRateOut(BaseModel):
    home_currency: str
    visiting_currency: str
    rate: float
