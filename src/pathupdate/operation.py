import dataclasses
import typing
from typing import Any

from pathupdate.errors import InvalidOperand
from pathupdate.value import Document, ValueNode, format_value, from_python


@dataclasses.dataclass
class Operation:
    operator: str
    path: str
    operand: ValueNode

    def __post_init__(self):
        self.operand = from_python(self.operand)


@dataclasses.dataclass
class UpdateSpec:
    """Ordered (operator, path, operand) triples."""

    operations: list[Operation] = dataclasses.field(default_factory=list)

    def __iter__(self) -> typing.Iterator[Operation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def add(self, operator: str, path: str, operand: Any = None) -> "UpdateSpec":
        self.operations.append(Operation(operator, path, operand))
        return self

    @classmethod
    def from_mapping(cls, update: typing.Mapping[str, Any] | Document) -> "UpdateSpec":
        """
        Build a spec from an update document such as
        {"$set": {"v.foo": 1}, "$pop": {"v.array": -1}}.

        Operator names are not checked here; the updater validates them
        against its registry before applying anything.
        """
        if isinstance(update, Document):
            update = update.fields
        spec = cls()
        for operator, fields in update.items():
            if isinstance(fields, Document):
                fields = fields.fields
            if not isinstance(fields, typing.Mapping):
                raise InvalidOperand(
                    "Modifiers operate on fields but we found type "
                    f"{from_python(fields).type_name} instead. For example: "
                    "{$mod: {<field>: ...}} not "
                    f"{{{operator}: {format_value(from_python(fields))}}}"
                )
            for path, operand in fields.items():
                spec.add(operator, path, operand)
        return spec
