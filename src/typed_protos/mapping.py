"""Typed map backing map fields."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any

from typed_protos.convert import convert, value_repr
from typed_protos.types import Descriptor

# Methods exposed to scripts, as listed by dir()
MAP_METHODS = [
    "clear",
    "get",
    "items",
    "keys",
    "pop",
    "popitem",
    "setdefault",
    "update",
    "values",
]

_MISSING = object()


class TypedMap(MutableMapping):
    """An insertion-ordered mapping with typed keys and values.

    Keys and values are converted independently against ``key_type`` and
    ``value_type``. Lookups (``in``, ``get``, ``pop``, indexing) convert the
    key as well, so a key of the wrong type raises rather than matching an
    equal value of another type. Overwriting an existing key keeps its position.
    ``popitem`` removes the oldest entry. ``items``, ``keys`` and ``values``
    return lists, so they never observe later mutation.
    """

    def __init__(
        self,
        key_type: Descriptor,
        value_type: Descriptor,
        entries: Mapping[Any, Any] | Iterable[tuple[Any, Any]] = (),
    ) -> None:
        self._key_type = key_type
        self._value_type = value_type
        self._entries: dict[Any, Any] = {}
        self.update(entries)

    @property
    def key_type(self) -> Descriptor:
        return self._key_type

    @property
    def value_type(self) -> Descriptor:
        return self._value_type

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._entries)

    def _key(self, key: Any) -> Any:
        # Lookups convert keys the same way stores do.
        return convert(key, self._key_type)

    def __contains__(self, key: object) -> bool:
        return self._key(key) in self._entries

    def __getitem__(self, key: Any) -> Any:
        k = self._key(key)
        try:
            return self._entries[k]
        except KeyError:
            raise KeyError(key) from None

    def __setitem__(self, key: Any, value: Any) -> None:
        k = self._key(key)
        v = convert(value, self._value_type)
        self._entries[k] = v

    def __delitem__(self, key: Any) -> None:
        k = self._key(key)
        try:
            del self._entries[k]
        except KeyError:
            raise KeyError(key) from None

    def get(self, key: Any, default: Any = None) -> Any:
        return self._entries.get(self._key(key), default)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        k = self._key(key)
        if k in self._entries:
            return self._entries[k]
        v = convert(default, self._value_type)
        self._entries[k] = v
        return v

    def update(self, other: Any = (), /, **kwargs: Any) -> None:  # type: ignore[override]
        """Set every pair from ``other`` and ``kwargs``, all or nothing."""
        if isinstance(other, Mapping):
            pairs: Iterable[Any] = list(other.items())
        elif hasattr(other, "keys"):
            pairs = [(k, other[k]) for k in other.keys()]
        else:
            pairs = other
        staged: list[tuple[Any, Any]] = []
        for i, pair in enumerate(pairs):
            if isinstance(pair, (str, bytes)) or not isinstance(pair, Iterable):
                raise TypeError(
                    f"update: sequence element #{i} is not a key/value pair"
                )
            pair = tuple(pair)
            if len(pair) != 2:
                raise ValueError(
                    f"update: sequence element #{i} has length {len(pair)}, want 2"
                )
            staged.append(
                (convert(pair[0], self._key_type), convert(pair[1], self._value_type))
            )
        for key, value in kwargs.items():
            staged.append((convert(key, self._key_type), convert(value, self._value_type)))
        for k, v in staged:
            self._entries[k] = v

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        k = self._key(key)
        if k in self._entries:
            return self._entries.pop(k)
        if default is _MISSING:
            raise KeyError(key)
        return default

    def popitem(self) -> tuple[Any, Any]:
        if not self._entries:
            raise KeyError("popitem: empty dict")
        key = next(iter(self._entries))
        return key, self._entries.pop(key)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> list[tuple[Any, Any]]:  # type: ignore[override]
        return list(self._entries.items())

    def keys(self) -> list[Any]:  # type: ignore[override]
        return list(self._entries.keys())

    def values(self) -> list[Any]:  # type: ignore[override]
        return list(self._entries.values())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TypedMap):
            return self._entries == other._entries
        if isinstance(other, dict):
            return self._entries == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __dir__(self) -> list[str]:
        return list(MAP_METHODS)

    def __repr__(self) -> str:
        return (
            "{"
            + ", ".join(f"{value_repr(k)}: {value_repr(v)}" for k, v in self._entries.items())
            + "}"
        )

    __str__ = __repr__
