"""Semantic value kinds and the element comparators they select."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from realm_testkit.assertions.expect import UNDEFINED

FLOAT_TOLERANCE = 0.000001


class ValueKind(str, Enum):
    FLOAT = "float"
    DOUBLE = "double"
    DATA = "data"
    DATE = "date"
    OBJECT = "object"
    LIST = "list"
    DEFAULT = "default"

    @classmethod
    def parse(cls, tag: str | None) -> ValueKind:
        """Map a property type tag such as ``"date?"`` to its kind."""
        if not tag:
            return cls.DEFAULT
        try:
            return cls(tag.replace("?", ""))
        except ValueError:
            return cls.DEFAULT


class TypedList(list):
    """A list that carries the property type tag of its elements."""

    def __init__(self, items: Iterable[Any] = (), type: str | None = None) -> None:
        super().__init__(items)
        self.type = type

    @property
    def kind(self) -> ValueKind:
        return ValueKind.parse(self.type)


def epoch(value: datetime | None) -> float | None:
    return value.timestamp() if value is not None else None


def object_keys(obj: Any) -> list[str]:
    if isinstance(obj, Mapping):
        return list(obj.keys())
    return [key for key in vars(obj) if not key.startswith("_")]


def object_field(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, UNDEFINED)
    return getattr(obj, key, UNDEFINED)


def _same(a: Any, b: Any) -> bool:
    return a is b or a == b


def _same_bytes(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if a is None or b is None:
        return False
    return bytes(a) == bytes(b)


def _same_instant(a: datetime | None, b: datetime | None) -> bool:
    return epoch(a) == epoch(b)


def _close(a: float | None, b: float | None) -> bool:
    if a is None or b is None:
        return a is b
    return b - FLOAT_TOLERANCE <= a <= b + FLOAT_TOLERANCE


def _same_fields(a: Any, b: Any) -> bool:
    return all(_same(object_field(a, k), object_field(b, k)) for k in object_keys(a))


ElementComparator = Callable[[Any, Any], bool]

ELEMENT_COMPARATORS: dict[ValueKind, ElementComparator] = {
    ValueKind.DATA: _same_bytes,
    ValueKind.DATE: _same_instant,
    ValueKind.FLOAT: _close,
    ValueKind.DOUBLE: _close,
    ValueKind.OBJECT: _same_fields,
    ValueKind.LIST: _same,
    ValueKind.DEFAULT: _same,
}


def element_comparator(values: Any) -> ElementComparator:
    """Comparator for the elements of ``values``, chosen by its ``type`` tag."""
    return ELEMENT_COMPARATORS[ValueKind.parse(getattr(values, "type", None))]
