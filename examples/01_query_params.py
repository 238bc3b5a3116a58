"""
Example 01: Query Parameters

This example demonstrates converting a search form to and from a URL query string.
"""

from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlencode

from struct_map import Int32, marshal, mapfield, unmarshal


@dataclass
class PriceRange:
    """Nested record, keys become price.from / price.to"""
    low: int = mapfield("from", default=0)
    high: int = mapfield("to", default=0)


@dataclass
class Paging:
    """Embedded record, keys sit at the top level"""
    page: int = 1
    per_page: Int32 = mapfield("per_page", default=20)


@dataclass
class ProductSearch:
    query: str = mapfield("q,required", default="")
    categories: list[str] = mapfield("category,omitempty", default_factory=list)
    price: PriceRange = field(default_factory=PriceRange)
    paging: Paging = mapfield(embedded=True, default_factory=Paging)
    seller: str | None = None


def main():
    search = ProductSearch(
        query="running shoes",
        categories=["sport", "outdoor"],
        price=PriceRange(low=50, high=150),
        paging=Paging(page=2),
    )

    print("=== Query Parameters ===\n")

    # Record -> query string
    print("1. Marshal:")
    values = {}
    marshal(search, values)
    query = urlencode(values, doseq=True)
    print(f"   Values: {values}")
    print(f"   Query:  {query}\n")

    # Query string -> record
    print("2. Unmarshal:")
    decoded = ProductSearch()
    unmarshal(parse_qs(query), decoded)
    print(f"   Record: {decoded}")
    print(f"   Equal:  {decoded == search}\n")


if __name__ == "__main__":
    main()
