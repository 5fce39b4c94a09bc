"""Query string parameters, addressable and writable.

Route parameters are merged into this view during augmentation, so a
handler reads ``/users/42?tab=posts`` as ``{"id": "42", "tab": "posts"}``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs, urlencode


class QueryParams(Mapping[str, str]):
    """Query string parameters.

    Attributes:
        _data: Field name -> list of values, in first-seen order.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    ``set`` replaces every value for a key with a single one.
    """

    _data: dict[str, list[str]]

    __slots__ = ("_data",)

    def __init__(self, query_string: str | bytes = "") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self._data = parse_qs(query_string, keep_blank_values=True)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def set(self, key: str, value: str) -> None:
        """Replace all values of *key* with *value*."""
        self._data[key] = [value]

    def to_dict(self) -> dict[str, str]:
        """First value of every key, as a plain dict."""
        return {key: values[0] for key, values in self._data.items() if values}

    def encode(self) -> str:
        """Serialize back to a query string (without the leading ``?``)."""
        return urlencode(
            [(key, value) for key, values in self._data.items() for value in values]
        )
