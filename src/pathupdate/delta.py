import dataclasses

from pathupdate.value import ValueNode


@dataclasses.dataclass
class Delta:
    """One operator application that changed the document."""

    operator: str
    path: str
    new_value: ValueNode | None
    old_value: ValueNode | None

    def __repr__(self):
        return (
            f"Delta(operator='{self.operator}', path='{self.path}', "
            f"new_value={self.new_value!r}, old_value={self.old_value!r})"
        )
