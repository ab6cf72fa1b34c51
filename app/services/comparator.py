import re

from app.schemas.comparison import ComparisonRow, MatchedPair, NormalizedListing
from app.schemas.product_search import Product

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_FLOAT = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def extract_numeric_price(price: str) -> float:
    """Turn a price string like "S$1,299.00" into 1299.0.

    Every character other than digits and '.' is dropped, then the longest
    leading number is read. Thousands separators written as '.' are not
    understood, so "Rp 150.000" reads as 150.0. Unparseable input gives 0.0.
    """
    cleaned = _NON_NUMERIC.sub("", price or "")
    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return 0.0
    return float(match.group())


def normalize(products: list[Product]) -> list[NormalizedListing]:
    return [
        NormalizedListing(**p.model_dump(), numeric_price=extract_numeric_price(p.price))
        for p in products
    ]


def titles_match(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a in b or b in a


def find_matching_index(listing: NormalizedListing, candidates: list[NormalizedListing]) -> int | None:
    """Index of the first candidate whose title contains, or is contained by, the listing's title."""
    for index, candidate in enumerate(candidates):
        if titles_match(candidate.title, listing.title):
            return index
    return None


def match_listings(
    home: list[NormalizedListing], visiting: list[NormalizedListing]
) -> list[MatchedPair]:
    """Pair home and visiting listings by title containment.

    Greedy single pass: each home listing takes the first matching visiting
    listing, but only if no earlier home listing already claimed it. There
    is no search for an alternative. Matched pairs come first, then
    unmatched home listings, then unclaimed visiting listings.
    """
    pairs: list[MatchedPair] = []
    used_home: set[int] = set()
    used_visiting: set[int] = set()

    for home_index, home_listing in enumerate(home):
        visiting_index = find_matching_index(home_listing, visiting)
        if visiting_index is None or visiting_index in used_visiting:
            continue
        pairs.append(MatchedPair(home=home_listing, visiting=visiting[visiting_index]))
        used_home.add(home_index)
        used_visiting.add(visiting_index)

    pairs.extend(
        MatchedPair(home=listing) for i, listing in enumerate(home) if i not in used_home
    )
    pairs.extend(
        MatchedPair(visiting=listing) for i, listing in enumerate(visiting) if i not in used_visiting
    )
    return pairs


def convert_price(listing: NormalizedListing | None, exchange_rate: float | None) -> float | None:
    """Visiting price expressed in home currency, unrounded."""
    # zero means "no rate" or "price could not be read"; neither converts
    if not exchange_rate or listing is None or not listing.numeric_price:
        return None
    return listing.numeric_price / exchange_rate


def format_converted(converted: float | None, home_symbol: str = "") -> str | None:
    if converted is None:
        return None
    return f"{home_symbol}{converted:.2f}"


def build_row(pair: MatchedPair, exchange_rate: float | None, home_symbol: str = "") -> ComparisonRow:
    row = ComparisonRow(home=pair.home, visiting=pair.visiting)

    converted = convert_price(pair.visiting, exchange_rate)
    if converted is None:
        return row

    row.converted_price = converted
    row.converted_display = format_converted(converted, home_symbol)

    if pair.home is not None and pair.home.numeric_price:
        row.home_cheaper = pair.home.numeric_price < converted
        row.visiting_cheaper = converted < pair.home.numeric_price
    return row


def compare(
    home: list[Product],
    visiting: list[Product],
    exchange_rate: float | None = None,
    home_symbol: str = "",
) -> list[ComparisonRow]:
    """Normalize, match and convert two result sets into display rows."""
    pairs = match_listings(normalize(home), normalize(visiting))
    return [build_row(pair, exchange_rate, home_symbol) for pair in pairs]
