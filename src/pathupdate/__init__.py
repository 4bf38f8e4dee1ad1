from pathupdate.config import UpdateConfig
from pathupdate.delta import Delta
from pathupdate.errors import (
    BadValue,
    ConflictingPaths,
    ErrorCode,
    ImmutableField,
    InvalidOperand,
    PathSyntaxError,
    PathTypeMismatch,
    UnknownOperator,
    UpdateError,
)
from pathupdate.operation import Operation, UpdateSpec
from pathupdate.operators import OPERATORS, Operator, Outcome, register_operator
from pathupdate.path import Location, Path, get_path, parse_index, parse_path, resolve
from pathupdate.update import UpdateReport, Updater, apply
from pathupdate.value import (
    Array,
    Bool,
    Document,
    Double,
    Int32,
    Int64,
    Null,
    String,
    ValueNode,
    from_python,
    to_python,
)

__all__ = [
    "OPERATORS",
    "Array",
    "BadValue",
    "Bool",
    "ConflictingPaths",
    "Delta",
    "Document",
    "Double",
    "ErrorCode",
    "ImmutableField",
    "Int32",
    "Int64",
    "InvalidOperand",
    "Location",
    "Null",
    "Operation",
    "Operator",
    "Outcome",
    "Path",
    "PathSyntaxError",
    "PathTypeMismatch",
    "String",
    "UnknownOperator",
    "UpdateConfig",
    "UpdateError",
    "UpdateReport",
    "UpdateSpec",
    "Updater",
    "ValueNode",
    "apply",
    "from_python",
    "get_path",
    "parse_index",
    "parse_path",
    "register_operator",
    "resolve",
    "to_python",
]
