import dataclasses

from pathupdate.config import MAX_BACKFILL
from pathupdate.errors import BadValue, PathSyntaxError, PathTypeMismatch
from pathupdate.value import Array, Document, Null, ValueNode, format_element

Key = str | int  # str for document fields, int for array indices


class Path(tuple):
    """
    Dotted path split into raw components.

    Components stay strings: whether "0" is a field name or an array index
    is only known once the node it addresses is seen.
    """

    dotted: str

    def __new__(cls, components, dotted: str | None = None):
        self = super().__new__(cls, components)
        self.dotted = dotted if dotted is not None else ".".join(self)
        return self

    def __str__(self):
        return self.dotted

    def __repr__(self):
        return f"Path({self.dotted!r})"

    def prefix(self, length: int) -> str:
        return ".".join(self[:length])

    def is_prefix_of(self, other: "Path") -> bool:
        return len(self) <= len(other) and tuple(other[: len(self)]) == tuple(self)


def parse_path(text: str) -> Path:
    """
    Split a dotted update path into components.

    Raises:
    - PathSyntaxError for an empty path or an empty component
      (leading, trailing or doubled dot).
    """
    if isinstance(text, Path):
        return text
    if not isinstance(text, str) or not text:
        raise PathSyntaxError("An empty update path is not valid.")
    components = text.split(".")
    if "" in components:
        raise PathSyntaxError(
            f"The update path '{text}' contains an empty field name, which is not allowed."
        )
    return Path(components, text)


def parse_index(component: str) -> int | None:
    """Return the array index spelled by `component`, or None if it is not one."""
    if not (component.isascii() and component.isdigit()):
        return None
    if len(component) > 1 and component[0] == "0":
        return None
    return int(component)


def _not_viable(
    node: ValueNode, path: Path, depth: int, create_missing: bool
) -> PathTypeMismatch:
    component = path[depth]
    element = format_element(path[depth - 1], node)
    if create_missing:
        message = f"Cannot create field '{component}' in element {element}"
    else:
        message = (
            f"Cannot use the part ({component}) of ({path.dotted}) "
            f"to traverse the element ({element})"
        )
    return PathTypeMismatch(message, path=path.prefix(depth), type_name=node.type_name)


def _key_for(node: ValueNode, path: Path, depth: int, create_missing: bool) -> Key:
    # document lookup first: a numeral under a document is a field name
    if isinstance(node, Document):
        return path[depth]
    if isinstance(node, Array):
        index = parse_index(path[depth])
        if index is not None:
            return index
    raise _not_viable(node, path, depth, create_missing)


def _place(
    container: Document | Array, key: Key, value: ValueNode, max_backfill: int
) -> None:
    if isinstance(container, Document):
        container.set(key, value)
        return
    if key < len(container):
        container.set(key, value)
        return
    gap = key - len(container)
    if gap > max_backfill:
        raise BadValue(f"can't backfill more than {max_backfill} elements")
    for _ in range(gap):
        container.append(Null())
    container.append(value)


@dataclasses.dataclass
class Location:
    """
    A resolved update target: the parent container and the final key.

    The key is already typed for the container (str for a Document, int for
    an Array), so the parent can be mutated after resolution.
    """

    container: Document | Array
    key: Key
    path: Path

    def get(self) -> ValueNode | None:
        return self.container.get(self.key)

    @property
    def exists(self) -> bool:
        return self.get() is not None

    def set(self, value: ValueNode, *, max_backfill: int = MAX_BACKFILL) -> None:
        _place(self.container, self.key, value, max_backfill)

    def remove(self) -> ValueNode | None:
        """
        Remove the target. Array elements are replaced by null so the array
        stays dense and later indices keep their meaning.
        """
        if isinstance(self.container, Document):
            return self.container.remove(self.key)
        removed = self.container.get(self.key)
        if removed is not None:
            self.container.set(self.key, Null())
        return removed


def resolve(
    document: Document,
    path: Path | str,
    *,
    create_missing: bool = False,
    max_backfill: int = MAX_BACKFILL,
) -> Location | None:
    """
    Walk `document` along `path` and return the location of its last component.

    With `create_missing`, absent intermediate levels are created as empty
    documents (an absent parent is never turned into an array), and array
    indices past the end are reached by padding with nulls. Without it, an
    absent intermediate level makes the path unresolvable and None is returned.
    The final component is not created here; the operator decides that.

    Raises:
    - PathSyntaxError when `path` is a malformed string.
    - PathTypeMismatch when a component addresses a scalar as a container, or
      an array with a non-index component. This happens with or without
      `create_missing`.
    - BadValue when padding would exceed `max_backfill`.
    """
    path = parse_path(path)
    current: ValueNode = document
    for depth in range(len(path) - 1):
        key = _key_for(current, path, depth, create_missing)
        child = current.get(key)
        if child is None:
            if not create_missing:
                return None
            child = Document()
            _place(current, key, child, max_backfill)
        current = child

    key = _key_for(current, path, len(path) - 1, create_missing)
    return Location(current, key, path)


def get_path(document: Document, path: Path | str) -> ValueNode | None:
    """Return the node at `path`, or None when the path does not resolve."""
    location = resolve(document, path)
    if location is None:
        return None
    return location.get()
