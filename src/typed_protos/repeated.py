"""Typed list backing repeated fields."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableSequence
from typing import Any, overload

from typed_protos.convert import convert, value_repr
from typed_protos.types import Descriptor

# Methods exposed to scripts, as listed by dir()
LIST_METHODS = ["append", "clear", "extend", "index", "insert", "pop", "remove"]


class TypedList(MutableSequence):
    """A mutable sequence whose elements all match one element descriptor.

    Every element stored has passed :func:`~typed_protos.convert.convert`
    against ``element_type``. Single-element operations leave the list
    unchanged on failure; bulk operations (``extend``, slice assignment)
    convert every element before committing any of them.
    """

    def __init__(self, element_type: Descriptor, values: Iterable[Any] = ()) -> None:
        self._element_type = element_type
        self._items: list[Any] = []
        self.extend(values)

    @property
    def element_type(self) -> Descriptor:
        return self._element_type

    def _convert_all(self, values: Iterable[Any]) -> list[Any]:
        return [convert(v, self._element_type) for v in values]

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> TypedList: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            result = TypedList(self._element_type)
            result._items = self._items[index]
            return result
        self._check_index(index, "index")
        return self._items[index]

    def __setitem__(self, index: int | slice, value: Any) -> None:
        if isinstance(index, slice):
            self._items[index] = self._convert_all(value)
            return
        # No implicit growth: the index must address an existing element.
        self._check_index(index, "assignment index")
        self._items[index] = convert(value, self._element_type)

    def __delitem__(self, index: int | slice) -> None:
        if not isinstance(index, slice):
            self._check_index(index, "deletion index")
        del self._items[index]

    def _check_index(self, index: int, what: str) -> None:
        n = len(self._items)
        if not -n <= index < n:
            raise IndexError(f"list {what} {index} out of range [0, {n})")

    def append(self, value: Any) -> None:
        self._items.append(convert(value, self._element_type))

    def extend(self, values: Iterable[Any]) -> None:
        if isinstance(values, (str, bytes)):
            raise TypeError(f"extend: got {type(values).__name__}, want iterable of elements")
        self._items.extend(self._convert_all(values))

    def insert(self, index: int, value: Any) -> None:
        self._items.insert(index, convert(value, self._element_type))

    def pop(self, index: int = -1) -> Any:
        if not self._items:
            raise IndexError("pop from empty list")
        self._check_index(index, "pop index")
        return self._items.pop(index)

    def remove(self, value: Any) -> None:
        for i, item in enumerate(self._items):
            if item == value:
                del self._items[i]
                return
        raise ValueError(f"remove: element {value_repr(value)} not found")

    def clear(self) -> None:
        self._items.clear()

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __contains__(self, value: Any) -> bool:
        return value in self._items

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TypedList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __dir__(self) -> list[str]:
        return list(LIST_METHODS)

    def __repr__(self) -> str:
        return "[" + ", ".join(value_repr(v) for v in self._items) + "]"

    __str__ = __repr__
