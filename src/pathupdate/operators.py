"""
Update operators.

Each operator is registered under its name and receives the location that
`path.resolve` produced for it. Adding an operator means adding a class
here; path resolution does not change.
"""

import copy
import dataclasses
import typing

from pathupdate.config import UpdateConfig
from pathupdate.errors import (
    BadValue,
    ErrorCode,
    InvalidOperand,
    PathTypeMismatch,
    UnknownOperator,
)
from pathupdate.path import Location, Path
from pathupdate.value import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    Array,
    Document,
    Double,
    Int32,
    Int64,
    Null,
    ValueNode,
    format_element,
    format_value,
)


@dataclasses.dataclass(frozen=True)
class Outcome:
    """
    Result of one operator application.

    old_value/new_value are the target before and after; `$pop` reports the
    removed element as old_value.
    """

    changed: bool
    old_value: ValueNode | None = None
    new_value: ValueNode | None = None


NO_CHANGE = Outcome(changed=False)


class Operator:
    name: typing.ClassVar[str] = ""
    # resolve the path with create_missing
    creates_path: typing.ClassVar[bool] = False

    def validate(self, path: Path, operand: ValueNode) -> ValueNode:
        """Check the operand before anything is mutated; return it."""
        return operand

    def apply(
        self,
        location: Location | None,
        operand: ValueNode,
        *,
        document: Document,
        config: UpdateConfig,
    ) -> Outcome:
        raise NotImplementedError


OPERATORS: dict[str, Operator] = {}


def register_operator(name: str):
    def decorator(cls: type[Operator]) -> type[Operator]:
        cls.name = name
        OPERATORS[name] = cls()
        return cls

    return decorator


def get_operator(name: str, registry: typing.Mapping[str, Operator] | None = None) -> Operator:
    registry = OPERATORS if registry is None else registry
    try:
        return registry[name]
    except KeyError:
        raise UnknownOperator(name) from None


def _id_element(document: Document) -> str:
    _id = document.get("_id")
    return "{}" if _id is None else format_element("_id", _id)


@register_operator("$set")
class SetOperator(Operator):
    creates_path = True

    def apply(self, location, operand, *, document, config):
        existing = location.get()
        if existing is not None and existing == operand:
            return NO_CHANGE
        location.set(copy.deepcopy(operand), max_backfill=config.max_backfill)
        return Outcome(True, existing, operand)


@register_operator("$unset")
class UnsetOperator(Operator):
    def apply(self, location, operand, *, document, config):
        if location is None:
            return NO_CHANGE
        existing = location.get()
        if existing is None:
            return NO_CHANGE
        if isinstance(location.container, Array) and isinstance(existing, Null):
            return NO_CHANGE
        location.remove()
        return Outcome(True, existing, None)


@register_operator("$pop")
class PopOperator(Operator):
    """
    Remove the first (operand -1) or last (operand 1) element of an array.
    A missing path or an empty array is left alone.
    """

    def validate(self, path, operand):
        if not operand.is_number:
            raise InvalidOperand(
                f"Expected a number in: {path.dotted}: {format_value(operand)}"
            )
        if operand.value not in (1, -1):
            raise InvalidOperand(f"$pop expects 1 or -1, found: {format_value(operand)}")
        return operand

    def apply(self, location, operand, *, document, config):
        if location is None:
            return NO_CHANGE
        existing = location.get()
        if existing is None:
            return NO_CHANGE
        if not isinstance(existing, Array):
            raise PathTypeMismatch(
                f"Path '{location.path.dotted}' contains an element of "
                f"non-array type '{existing.type_name}'",
                ErrorCode.TYPE_MISMATCH,
                path=location.path.dotted,
                type_name=existing.type_name,
            )
        if not len(existing):
            return NO_CHANGE
        if operand.value < 0:
            removed = existing.pop_first()
        else:
            removed = existing.pop_last()
        return Outcome(True, removed, None)


_INT_LABELS = {Int32: "NumberInt", Int64: "NumberLong"}


def _add(current: ValueNode, delta: ValueNode, document: Document) -> ValueNode:
    if isinstance(current, Double) or isinstance(delta, Double):
        return Double(current.value + delta.value)
    total = current.value + delta.value
    if isinstance(current, Int32) and isinstance(delta, Int32):
        if INT32_MIN <= total <= INT32_MAX:
            return Int32(total)
    if INT64_MIN <= total <= INT64_MAX:
        return Int64(total)
    raise BadValue(
        "Failed to apply $inc operations to current value "
        f"(({_INT_LABELS[type(current)]}){current.value}) "
        f"for document {_id_element(document)}"
    )


@register_operator("$inc")
class IncOperator(Operator):
    creates_path = True

    def validate(self, path, operand):
        if not operand.is_number:
            raise InvalidOperand(
                "Cannot increment with non-numeric argument: "
                f"{format_element(path.dotted, operand)}",
                ErrorCode.TYPE_MISMATCH,
            )
        return operand

    def apply(self, location, operand, *, document, config):
        existing = location.get()
        if existing is None:
            location.set(copy.deepcopy(operand), max_backfill=config.max_backfill)
            return Outcome(True, None, operand)
        if not existing.is_number:
            raise PathTypeMismatch(
                "Cannot apply $inc to a value of non-numeric type. "
                f"{_id_element(document)} has the field '{location.path[-1]}' "
                f"of non-numeric type {existing.type_name}",
                ErrorCode.TYPE_MISMATCH,
                path=location.path.dotted,
                type_name=existing.type_name,
            )
        result = _add(existing, operand, document)
        if result == existing:
            return NO_CHANGE
        location.set(result)
        return Outcome(True, existing, result)
