"""MongoDB adapter — composable criteria for cross-aggregate event queries.

Example::

    builder = MongoCriteriaBuilder()
    criteria = builder.property("type").is_("Order") & (
        builder.property("timeStamp").greater_than_equals(since)
        | ~builder.property("payloadType").in_(["OrderDraftSaved"])
    )
    async with strategy.find_events(collection, criteria) as cursor:
        ...
"""

from __future__ import annotations

import abc
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from mp_eventstore.kernel.time import to_sortable_string


class MongoCriteria(abc.ABC):
    """Abstract boolean filter that renders itself as a MongoDB query document."""

    @abc.abstractmethod
    def as_filter(self) -> dict[str, Any]: ...

    # Named combinators ------------------------------------------------
    def and_(self, other: "MongoCriteria") -> "AndCriteria":
        return AndCriteria(self, other)

    def or_(self, other: "MongoCriteria") -> "OrCriteria":
        return OrCriteria(self, other)

    def not_(self) -> "NotCriteria":
        return NotCriteria(self)

    # Operator overloads -----------------------------------------------
    def __and__(self, other: "MongoCriteria") -> "AndCriteria":
        return AndCriteria(self, other)

    def __or__(self, other: "MongoCriteria") -> "OrCriteria":
        return OrCriteria(self, other)

    def __invert__(self) -> "NotCriteria":
        return NotCriteria(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_filter()!r})"


class SimpleCriteria(MongoCriteria):
    """A single ``property <operator> value`` predicate."""

    def __init__(self, property_name: str, operator: str | None, value: Any) -> None:
        self._property = property_name
        self._operator = operator
        self._value = value

    def as_filter(self) -> dict[str, Any]:
        if self._operator is None:
            return {self._property: self._value}
        return {self._property: {self._operator: self._value}}


class AndCriteria(MongoCriteria):
    """Conjunction of two criteria."""

    def __init__(self, left: MongoCriteria, right: MongoCriteria) -> None:
        self._left = left
        self._right = right

    def as_filter(self) -> dict[str, Any]:
        return {"$and": [self._left.as_filter(), self._right.as_filter()]}


class OrCriteria(MongoCriteria):
    """Disjunction of two criteria."""

    def __init__(self, left: MongoCriteria, right: MongoCriteria) -> None:
        self._left = left
        self._right = right

    def as_filter(self) -> dict[str, Any]:
        return {"$or": [self._left.as_filter(), self._right.as_filter()]}


class NotCriteria(MongoCriteria):
    """Negation of a criteria."""

    def __init__(self, criteria: MongoCriteria) -> None:
        self._criteria = criteria

    def as_filter(self) -> dict[str, Any]:
        return {"$nor": [self._criteria.as_filter()]}


def _operand(value: Any) -> Any:
    # timeStamp is stored as a sortable string, so compare against the same encoding
    if isinstance(value, datetime):
        return to_sortable_string(value)
    return value


class Property:
    """A stored document field that predicates can be built on."""

    def __init__(self, name: str) -> None:
        self.name = name

    def is_(self, value: Any) -> SimpleCriteria:
        return SimpleCriteria(self.name, None, _operand(value))

    def less_than(self, value: Any) -> SimpleCriteria:
        return SimpleCriteria(self.name, "$lt", _operand(value))

    def less_than_equals(self, value: Any) -> SimpleCriteria:
        return SimpleCriteria(self.name, "$lte", _operand(value))

    def greater_than(self, value: Any) -> SimpleCriteria:
        return SimpleCriteria(self.name, "$gt", _operand(value))

    def greater_than_equals(self, value: Any) -> SimpleCriteria:
        return SimpleCriteria(self.name, "$gte", _operand(value))

    def in_(self, values: Iterable[Any]) -> SimpleCriteria:
        return SimpleCriteria(self.name, "$in", [_operand(v) for v in values])

    def not_in(self, values: Iterable[Any]) -> SimpleCriteria:
        return SimpleCriteria(self.name, "$nin", [_operand(v) for v in values])


class MongoCriteriaBuilder:
    """Entry point for building :class:`MongoCriteria`."""

    def property(self, name: str) -> Property:
        return Property(name)


__all__ = [
    "AndCriteria",
    "MongoCriteria",
    "MongoCriteriaBuilder",
    "NotCriteria",
    "OrCriteria",
    "Property",
    "SimpleCriteria",
]
