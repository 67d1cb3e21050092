"""Query-string encoding in the store's flag grammar."""

from typing import Any, Mapping
from urllib.parse import quote

# Characters encodeURIComponent leaves alone besides letters, digits and "-_.~".
_UNRESERVED = "!*'()"


def encode_component(value: Any) -> str:
    """Percent-encode one key or value."""
    return quote(str(value), safe=_UNRESERVED)


def encode_query(params: Mapping[str, Any]) -> str:
    """
    Encode query parameters for the store.

    True renders as a bare flag ("query"), False is dropped entirely, and
    anything else becomes a percent-encoded key=value pair. Order follows
    the mapping's iteration order.

    Args:
        params: Parameter names to values

    Returns:
        Encoded query string without the leading "?"
    """
    fields = []
    for key, value in params.items():
        if value is True:
            fields.append(key)
        elif value is False:
            continue
        else:
            fields.append(f"{encode_component(key)}={encode_component(value)}")
    return '&'.join(fields)
