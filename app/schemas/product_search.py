from pydantic import BaseModel, ConfigDict

DEFAULT_TITLE = "Unknown Product"
DEFAULT_PRICE = "Price not available"
DEFAULT_STORE = "Unknown Store"
DEFAULT_LINK = "#"


class Product(BaseModel):
    title: str = DEFAULT_TITLE
    price: str = DEFAULT_PRICE  # as reported, with currency e.g. "S$399.00"
    store: str = DEFAULT_STORE
    link: str = DEFAULT_LINK
    image: str | None = None


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    country: str = ""
    query: str = ""


class SearchResponse(BaseModel):
    products: list[Product]


class ErrorResponse(BaseModel):
    error: str
