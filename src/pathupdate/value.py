"""
Tagged value model for documents and operator operands.

Every node is one of the closed set of variants below; update logic
branches on the variant, never on Python's implicit coercions. Plain
Python data converts in and out through `from_python` / `to_python`.
"""

import dataclasses
import math
import typing
from typing import Any, Iterator

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


class ValueNode:
    """Base of the closed variant; `type_name` is the runtime type alias."""

    type_name: typing.ClassVar[str] = ""

    @property
    def is_container(self) -> bool:
        return isinstance(self, (Document, Array))

    @property
    def is_number(self) -> bool:
        return isinstance(self, (Int32, Int64, Double))


@dataclasses.dataclass(frozen=True)
class Null(ValueNode):
    type_name: typing.ClassVar[str] = "null"

    @property
    def value(self) -> None:
        return None


@dataclasses.dataclass(frozen=True)
class Bool(ValueNode):
    value: bool
    type_name: typing.ClassVar[str] = "bool"

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise TypeError(f"Bool expects bool, got {type(self.value).__name__}")


def _check_int(value: Any, low: int, high: int, kind: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{kind} expects int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{value} does not fit in {kind}")


@dataclasses.dataclass(frozen=True)
class Int32(ValueNode):
    value: int
    type_name: typing.ClassVar[str] = "int"

    def __post_init__(self):
        _check_int(self.value, INT32_MIN, INT32_MAX, "Int32")


@dataclasses.dataclass(frozen=True)
class Int64(ValueNode):
    value: int
    type_name: typing.ClassVar[str] = "long"

    def __post_init__(self):
        _check_int(self.value, INT64_MIN, INT64_MAX, "Int64")


@dataclasses.dataclass(frozen=True, eq=False)
class Double(ValueNode):
    value: float
    type_name: typing.ClassVar[str] = "double"

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Double expects float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def __eq__(self, other):
        # bitwise identity: NaN equals NaN, -0.0 differs from 0.0
        if not isinstance(other, Double):
            return NotImplemented
        a, b = self.value, other.value
        if math.isnan(a) or math.isnan(b):
            return math.isnan(a) and math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)

    def __hash__(self):
        return hash(("double", self.value))


@dataclasses.dataclass(frozen=True)
class String(ValueNode):
    value: str
    type_name: typing.ClassVar[str] = "string"

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"String expects str, got {type(self.value).__name__}")


def _check_node(value: Any) -> None:
    if not isinstance(value, ValueNode):
        raise TypeError(f"expected a ValueNode, got {type(value).__name__}")


@dataclasses.dataclass(eq=False)
class Document(ValueNode):
    """
    Ordered mapping of field name -> node.

    Replacing an existing field keeps its position; new fields are
    appended. Equality is order-sensitive.
    """

    fields: dict[str, ValueNode] = dataclasses.field(default_factory=dict)
    type_name: typing.ClassVar[str] = "object"

    def __post_init__(self):
        for key, value in self.fields.items():
            if not isinstance(key, str):
                raise TypeError(f"Document keys must be str, got {type(key).__name__}")
            _check_node(value)

    def __eq__(self, other):
        if not isinstance(other, Document):
            return NotImplemented
        return list(self.fields.items()) == list(other.fields.items())

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def keys(self):
        return self.fields.keys()

    def items(self):
        return self.fields.items()

    def get(self, key: str) -> ValueNode | None:
        return self.fields.get(key)

    def set(self, key: str, value: ValueNode) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Document keys must be str, got {type(key).__name__}")
        _check_node(value)
        self.fields[key] = value

    def remove(self, key: str) -> ValueNode | None:
        return self.fields.pop(key, None)


@dataclasses.dataclass(eq=False)
class Array(ValueNode):
    """Dense, 0-indexed sequence of nodes."""

    items: list[ValueNode] = dataclasses.field(default_factory=list)
    type_name: typing.ClassVar[str] = "array"

    def __post_init__(self):
        for value in self.items:
            _check_node(value)

    def __eq__(self, other):
        if not isinstance(other, Array):
            return NotImplemented
        return self.items == other.items

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ValueNode]:
        return iter(self.items)

    def get(self, index: int) -> ValueNode | None:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def set(self, index: int, value: ValueNode) -> None:
        _check_node(value)
        if not 0 <= index < len(self.items):
            raise IndexError(f"Index {index} out of range for array of {len(self.items)}")
        self.items[index] = value

    def append(self, value: ValueNode) -> None:
        _check_node(value)
        self.items.append(value)

    def insert(self, index: int, value: ValueNode) -> None:
        _check_node(value)
        if not 0 <= index <= len(self.items):
            raise IndexError(f"Index {index} out of range for array of {len(self.items)}")
        self.items.insert(index, value)

    def remove_at(self, index: int) -> ValueNode:
        if not 0 <= index < len(self.items):
            raise IndexError(f"Index {index} out of range for array of {len(self.items)}")
        return self.items.pop(index)

    def pop_first(self) -> ValueNode:
        return self.remove_at(0)

    def pop_last(self) -> ValueNode:
        return self.remove_at(len(self.items) - 1)


def from_python(obj: Any) -> ValueNode:
    """
    Convert plain Python data into nodes.

    Mapping:
        None        -> Null
        bool        -> Bool
        int         -> Int32 if it fits, else Int64
        float       -> Double
        str         -> String
        dict        -> Document (keys must be str)
        list/tuple  -> Array
    Existing nodes are returned unchanged.
    """
    if isinstance(obj, ValueNode):
        return obj
    if obj is None:
        return Null()
    if isinstance(obj, bool):  # before int: bool is a subclass of int
        return Bool(obj)
    if isinstance(obj, int):
        if INT32_MIN <= obj <= INT32_MAX:
            return Int32(obj)
        return Int64(obj)
    if isinstance(obj, float):
        return Double(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, dict):
        return Document({k: from_python(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return Array([from_python(item) for item in obj])
    raise TypeError(f"Cannot convert {type(obj).__name__} to a document value")


def to_python(node: ValueNode) -> Any:
    if isinstance(node, Document):
        return {k: to_python(v) for k, v in node.items()}
    if isinstance(node, Array):
        return [to_python(item) for item in node]
    if isinstance(node, (Null, Bool, Int32, Int64, Double, String)):
        return node.value
    raise TypeError(f"Unknown value node: {type(node).__name__}")


def format_value(node: ValueNode) -> str:
    """Render a node the way server error messages print values."""
    if isinstance(node, Null):
        return "null"
    if isinstance(node, Bool):
        return "true" if node.value else "false"
    if isinstance(node, String):
        return f'"{node.value}"'
    if isinstance(node, Document):
        if not len(node):
            return "{}"
        inner = ", ".join(f"{k}: {format_value(v)}" for k, v in node.items())
        return "{ " + inner + " }"
    if isinstance(node, Array):
        if not len(node):
            return "[]"
        return "[ " + ", ".join(format_value(item) for item in node) + " ]"
    return repr(node.value)


def format_element(key: str, node: ValueNode) -> str:
    return f"{{{key}: {format_value(node)}}}"
