from __future__ import annotations
import re
from typing import Iterable, Iterator, Mapping, Union

from multidict import CIMultiDict


HeadersInit = Union["Headers", Mapping[str, str], Iterable[tuple[str, str]]]

_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_INVALID_VALUE = re.compile(r"[\r\n\x00]")


def validate_header_name(name: str) -> None:
    if not isinstance(name, str) or not _TOKEN.match(name):
        raise TypeError(f'Header name must be a valid HTTP token ["{name}"]')


def validate_header_value(name: str, value: str) -> None:
    if _INVALID_VALUE.search(value):
        raise TypeError(f'Invalid character in header content ["{name}"]')


def collect_request_headers(pairs: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """
    Group (name, value) pairs by name, keeping arrival order within each
    name. Duplicate names accumulate into one list.
    """
    result: dict[str, list[str]] = {}
    for name, value in pairs:
        result.setdefault(name, []).append(value)
    return result


class Headers:
    """
    Case-insensitive, multi-valued HTTP header container. Names are stored
    lower-cased. Iterating yields one (name, value) pair per stored value in
    insertion order; get() joins repeated values with ", ".
    """

    def __init__(self, init: HeadersInit | None = None) -> None:
        self._store: CIMultiDict[str] = CIMultiDict()

        if init is None:
            return

        if isinstance(init, Headers):
            pairs: Iterable[tuple[str, str]] = list(init)
        elif isinstance(init, Mapping):
            pairs = init.items()
        else:
            pairs = init

        for pair in pairs:
            if isinstance(pair, (str, bytes)) or len(pair) != 2:
                raise TypeError("Each header pair must be a name/value tuple")
            name, value = pair
            self.append(name, value)

    def append(self, name: str, value: str) -> None:
        value = str(value).strip()
        validate_header_name(name)
        validate_header_value(name, value)
        self._store.add(name.lower(), value)

    def set(self, name: str, value: str) -> None:
        value = str(value).strip()
        validate_header_name(name)
        validate_header_value(name, value)
        self._store[name.lower()] = value

    def get(self, name: str) -> str | None:
        values = self._store.getall(name, [])
        if not values:
            return None
        return ", ".join(values)

    def get_all(self, name: str) -> list[str]:
        return list(self._store.getall(name, []))

    def has(self, name: str) -> bool:
        return name in self._store

    def delete(self, name: str) -> None:
        self._store.popall(name, None)

    def keys(self) -> list[str]:
        return list(dict.fromkeys(self._store.keys()))

    def raw(self) -> dict[str, list[str]]:
        return collect_request_headers(self)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._store.items()))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._store

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.delete(name)

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"Headers({list(self)!r})"


def from_raw_headers(pairs: Iterable[tuple[str, str]]) -> Headers:
    """Build Headers from transport pairs, dropping pairs that are not valid HTTP headers."""
    headers = Headers()
    for name, value in pairs:
        try:
            headers.append(name, value)
        except TypeError:
            continue
    return headers
