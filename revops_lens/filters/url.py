"""
URL Query-String Mirror

An ordered key/value view of a browser query string, with the semantics
list views rely on:
- writing None or "" removes the key instead of storing an empty value
- keys this package owns are emitted in a fixed order so equal states
  always produce the same URL
- keys owned by someone else (tabs, list view ids) are preserved
"""

from typing import Iterator, Mapping, Optional, Union
from urllib.parse import parse_qsl, quote, urlencode

# Keys written by the list filter controller, in canonical order
LIST_STATE_KEYS = ("scope", "search", "sortField", "sortDir", "filters")


class UrlQuery:
    """Mutable query-string mirror."""

    def __init__(self, params: Optional[Mapping[str, str]] = None):
        self._params: dict[str, str] = {}
        for key, value in (params or {}).items():
            self.set(key, value)

    @classmethod
    def parse(cls, query: Union[str, Mapping[str, str], "UrlQuery", None]) -> "UrlQuery":
        """Build from a raw query string (with or without '?'), a mapping, or another mirror."""
        if query is None:
            return cls()
        if isinstance(query, UrlQuery):
            return cls(query.to_dict())
        if isinstance(query, Mapping):
            return cls(query)
        text = query[1:] if query.startswith("?") else query
        instance = cls()
        # Later duplicates win, the way a single-valued lookup reads them
        for key, value in parse_qsl(text, keep_blank_values=True):
            instance.set(key, value)
        return instance

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._params.get(key, default)

    def set(self, key: str, value: Optional[str]) -> None:
        if value is None or value == "":
            self._params.pop(key, None)
        else:
            self._params[key] = str(value)

    def delete(self, key: str) -> None:
        self._params.pop(key, None)

    def update(self, updates: Mapping[str, Optional[str]]) -> None:
        """Apply several writes at once; None or "" deletes."""
        for key, value in updates.items():
            self.set(key, value)

    def to_dict(self) -> dict[str, str]:
        return dict(self._params)

    def to_string(self) -> str:
        """Encoded query string without the leading '?'."""
        ordered = [(k, self._params[k]) for k in LIST_STATE_KEYS if k in self._params]
        ordered += [(k, v) for k, v in self._params.items() if k not in LIST_STATE_KEYS]
        return urlencode(ordered, quote_via=quote)

    def __contains__(self, key: str) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other) -> bool:
        if isinstance(other, UrlQuery):
            return self._params == other._params
        return NotImplemented

    def __repr__(self) -> str:
        return f"UrlQuery({self.to_string()!r})"
