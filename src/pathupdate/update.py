import copy
import dataclasses
import logging
import typing
from typing import Any

from pathupdate.config import DEFAULT_CONFIG, UpdateConfig
from pathupdate.delta import Delta
from pathupdate.errors import ConflictingPaths, ImmutableField, UpdateError
from pathupdate.operation import UpdateSpec
from pathupdate.operators import OPERATORS, Operator, get_operator
from pathupdate.path import Path, parse_path, resolve
from pathupdate.value import Document, ValueNode, from_python

logger = logging.getLogger(__name__)

Step = tuple[Operator, Path, ValueNode]


@dataclasses.dataclass
class UpdateReport:
    document: Document
    matched: bool = True
    modified_count: int = 0
    changes: list[Delta] = dataclasses.field(default_factory=list)

    @property
    def modified(self) -> bool:
        return self.modified_count > 0


def _check_conflicts(paths: list[Path]) -> None:
    for i, current in enumerate(paths):
        for earlier in paths[:i]:
            if earlier.is_prefix_of(current) or current.is_prefix_of(earlier):
                shorter = earlier if len(earlier) <= len(current) else current
                raise ConflictingPaths(
                    f"Updating the path '{current}' would create a conflict at '{shorter}'"
                )


class Updater:
    """
    Applies update specs to documents.

    An updater holds no per-call state; one instance can serve any number of
    calls, one at a time per document.
    """

    def __init__(
        self,
        config: UpdateConfig | None = None,
        operators: typing.Mapping[str, Operator] | None = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.operators = dict(OPERATORS if operators is None else operators)

    def validate(self, spec: UpdateSpec) -> list[Step]:
        """
        Check the whole spec up front: operator names, path syntax, operands
        and overlapping paths. Nothing is mutated.
        """
        steps: list[Step] = []
        for operation in spec:
            operator = get_operator(operation.operator, self.operators)
            path = parse_path(operation.path)
            operand = operator.validate(path, operation.operand)
            steps.append((operator, path, operand))
        _check_conflicts([path for _, path, _ in steps])
        return steps

    def apply(
        self,
        document: Document | typing.Mapping[str, Any],
        update: UpdateSpec | typing.Mapping[str, Any],
    ) -> UpdateReport:
        """
        Apply `update` to a copy of `document` and report the result.

        Operations run in the order given. The caller's document is never
        mutated: on success the updated copy is returned in the report, on
        error nothing is returned and there is nothing partial to discard.

        Raises:
        - UpdateError (or a subclass) for any invalid spec or any path that
          does not fit the document's shape.
        """
        document = from_python(document)
        if not isinstance(document, Document):
            raise TypeError(f"Expected a document, got {document.type_name}")
        spec = update if isinstance(update, UpdateSpec) else UpdateSpec.from_mapping(update)

        try:
            steps = self.validate(spec)
            output = copy.deepcopy(document)
            changes = [self._apply_step(output, *step) for step in steps]
        except UpdateError as err:
            logger.debug("Update aborted with code %d: %s", err.code, err.message)
            raise

        changes = [delta for delta in changes if delta is not None]
        return UpdateReport(
            document=output,
            matched=True,
            modified_count=1 if changes else 0,
            changes=changes,
        )

    def _apply_step(
        self, document: Document, operator: Operator, path: Path, operand: ValueNode
    ) -> Delta | None:
        location = resolve(
            document,
            path,
            create_missing=operator.creates_path,
            max_backfill=self.config.max_backfill,
        )
        outcome = operator.apply(location, operand, document=document, config=self.config)
        if not outcome.changed:
            logger.debug("%s left '%s' unchanged", operator.name, path)
            return None
        if path[0] in self.config.immutable_fields:
            raise ImmutableField(
                f"Performing an update on the path '{path}' would modify "
                f"the immutable field '{path[0]}'"
            )
        logger.debug("%s changed '%s'", operator.name, path)
        return Delta(
            operator=operator.name,
            path=path.dotted,
            new_value=outcome.new_value,
            old_value=outcome.old_value,
        )


_default_updater = Updater()


def apply(
    document: Document | typing.Mapping[str, Any],
    update: UpdateSpec | typing.Mapping[str, Any],
    *,
    config: UpdateConfig | None = None,
) -> UpdateReport:
    updater = _default_updater if config is None else Updater(config)
    return updater.apply(document, update)
