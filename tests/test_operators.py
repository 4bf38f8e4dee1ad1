import pytest

from pathupdate import (
    OPERATORS,
    BadValue,
    Document,
    Double,
    ErrorCode,
    Int32,
    Int64,
    InvalidOperand,
    Null,
    PathTypeMismatch,
    UnknownOperator,
    UpdateConfig,
    from_python,
    parse_path,
    resolve,
    to_python,
)
from pathupdate.operators import get_operator

CONFIG = UpdateConfig()


def run(document: Document, name: str, path: str, operand):
    operator = get_operator(name)
    parsed = parse_path(path)
    operand = operator.validate(parsed, from_python(operand))
    location = resolve(document, parsed, create_missing=operator.creates_path)
    return operator.apply(location, operand, document=document, config=CONFIG)


def test_registry_contains_builtin_operators():
    assert {"$set", "$unset", "$pop", "$inc"} <= set(OPERATORS)
    assert OPERATORS["$set"].name == "$set"


def test_get_operator_unknown():
    with pytest.raises(UnknownOperator) as exc_info:
        get_operator("$nope")
    assert exc_info.value.operator == "$nope"


# --- $set ------------------------------------------------------------------


def test_set_reports_old_and_new_values():
    doc = from_python({"v": 1})
    outcome = run(doc, "$set", "v", 2)
    assert outcome.changed
    assert outcome.old_value == Int32(1)
    assert outcome.new_value == Int32(2)


def test_set_equal_value_is_unchanged():
    doc = from_python({"v": {"a": [1, 2]}})
    outcome = run(doc, "$set", "v", {"a": [1, 2]})
    assert not outcome.changed


# --- $unset ----------------------------------------------------------------


def test_unset_removes_field():
    doc = from_python({"a": 1, "b": {"c": 2, "d": 3}})
    assert run(doc, "$unset", "b.c", "").changed
    assert to_python(doc) == {"a": 1, "b": {"d": 3}}


def test_unset_array_element_becomes_null():
    doc = from_python({"a": [1, 2, 3]})
    assert run(doc, "$unset", "a.1", "").changed
    assert to_python(doc) == {"a": [1, None, 3]}
    assert not run(doc, "$unset", "a.1", "").changed


@pytest.mark.parametrize("path", ["missing", "a.missing", "x.y", "a.b.5"])
def test_unset_missing_is_a_no_op(path):
    doc = from_python({"a": {"b": []}})
    assert not run(doc, "$unset", path, "").changed
    assert to_python(doc) == {"a": {"b": []}}


# --- $pop ------------------------------------------------------------------


def test_pop_reports_removed_element():
    doc = from_python({"a": [1, 2, 3]})
    outcome = run(doc, "$pop", "a", -1)
    assert outcome.old_value == Int32(1)
    assert to_python(doc) == {"a": [2, 3]}


def test_pop_on_nested_array_by_index():
    doc = from_python({"a": [[1, 2], [3]]})
    run(doc, "$pop", "a.0", 1)
    assert to_python(doc) == {"a": [[1], [3]]}


def test_pop_non_array_error_carries_path_and_type():
    doc = from_python({"v": {"foo": Int64(5)}})
    with pytest.raises(PathTypeMismatch) as exc_info:
        run(doc, "$pop", "v.foo", 1)
    err = exc_info.value
    assert err.code == ErrorCode.TYPE_MISMATCH
    assert err.code_name == "TypeMismatch"
    assert err.path == "v.foo"
    assert err.type_name == "long"
    assert str(err) == "Path 'v.foo' contains an element of non-array type 'long'"


def test_pop_through_scalar_fails():
    doc = from_python({"v": {"foo": 42}})
    with pytest.raises(PathTypeMismatch) as exc_info:
        run(doc, "$pop", "v.foo.bar", 1)
    assert exc_info.value.code == ErrorCode.PATH_NOT_VIABLE


# --- $inc ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("current", "delta", "expected"),
    [
        (Int32(1), Int32(2), Int32(3)),
        (Int32(2**31 - 1), Int32(1), Int64(2**31)),
        (Int32(1), Int64(1), Int64(2)),
        (Int64(1), Int32(-3), Int64(-2)),
        (Int32(1), Double(0.5), Double(1.5)),
        (Double(1.5), Int32(1), Double(2.5)),
    ],
)
def test_inc_promotes_types(current, delta, expected):
    doc = Document({"v": current})
    outcome = run(doc, "$inc", "v", delta)
    assert outcome.changed
    assert doc.get("v") == expected


def test_inc_creates_missing_field():
    doc = from_python({"_id": 1})
    run(doc, "$inc", "a.b", 5)
    assert to_python(doc) == {"_id": 1, "a": {"b": 5}}


def test_inc_by_zero_is_unchanged():
    doc = from_python({"v": 5})
    assert not run(doc, "$inc", "v", 0).changed


def test_inc_non_numeric_operand():
    with pytest.raises(InvalidOperand) as exc_info:
        run(from_python({"v": 1}), "$inc", "v", "foo")
    assert exc_info.value.code == ErrorCode.TYPE_MISMATCH
    assert exc_info.value.message == 'Cannot increment with non-numeric argument: {v: "foo"}'


def test_inc_non_numeric_target():
    doc = from_python({"_id": "string", "v": "foo"})
    with pytest.raises(PathTypeMismatch) as exc_info:
        run(doc, "$inc", "v", 1)
    assert exc_info.value.code == ErrorCode.TYPE_MISMATCH
    assert exc_info.value.message == (
        "Cannot apply $inc to a value of non-numeric type. "
        "{_id: \"string\"} has the field 'v' of non-numeric type string"
    )


def test_inc_int64_overflow():
    doc = from_python({"_id": "int64", "v": 2**63 - 1})
    with pytest.raises(BadValue) as exc_info:
        run(doc, "$inc", "v", 1)
    assert exc_info.value.message == (
        "Failed to apply $inc operations to current value "
        '((NumberLong)9223372036854775807) for document {_id: "int64"}'
    )
    assert doc.get("v") == Int64(2**63 - 1)


def test_inc_null_target_is_non_numeric():
    doc = Document({"v": Null()})
    with pytest.raises(PathTypeMismatch):
        run(doc, "$inc", "v", 1)
