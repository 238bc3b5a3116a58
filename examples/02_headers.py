"""
Example 02: HTTP Headers

This example demonstrates header mapping with canonical keys and a custom value type.
"""

from dataclasses import dataclass, field

from struct_map import StructMapError, mapfield, marshal_header, unmarshal_header


class MediaTypes:
    """Comma separated header value converting itself"""

    def __init__(self, types=None):
        self.types = list(types or [])

    def marshal_value(self):
        return [", ".join(self.types)] if self.types else []

    def unmarshal_value(self, values):
        self.types = [t.strip() for t in values[0].split(",")]

    def __repr__(self):
        return f"MediaTypes({self.types})"


@dataclass
class RequestHeaders:
    content_type: str = mapfield("content-type,required", default="")
    accept: MediaTypes = mapfield("accept,omitempty", default_factory=MediaTypes)
    request_id: str | None = mapfield("x-request-id", default=None)


def main():
    print("=== HTTP Headers ===\n")

    print("1. Marshal:")
    headers = {}
    marshal_header(
        RequestHeaders(
            content_type="application/json",
            accept=MediaTypes(["application/json", "text/plain"]),
            request_id="abc-123",
        ),
        headers,
    )
    for key, value in headers.items():
        print(f"   {key}: {value}")
    print()

    print("2. Unmarshal:")
    decoded = RequestHeaders()
    unmarshal_header(headers, decoded)
    print(f"   {decoded}\n")

    print("3. Missing required header:")
    try:
        unmarshal_header({"Accept": ["*/*"]}, RequestHeaders())
    except StructMapError as e:
        print(f"   Error: {e}")


if __name__ == "__main__":
    main()
