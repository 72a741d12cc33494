"""
Core schema representation for code generation.

Converts the plain literal value of a normalized schema declaration into
an ordered field tree that generators can work with consistently, and
holds the run-wide registry of known schema names.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class FieldKind(Enum):
    """Structural kind of a field."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    NESTED = "nested"
    ENUM_LITERAL = "enum"
    REFERENCE = "reference"


class PrimitiveTag(Enum):
    """Normalized primitive type tags."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "Date"
    OBJECT_ID = "ObjectId"
    DECIMAL128 = "Decimal128"
    MIXED = "Mixed"  # Schema.Types.Mixed, `{}` and `[]` elements


_TAGS_BY_NAME = {tag.value.lower(): tag for tag in PrimitiveTag}

EnumValue = Union[str, int, float]


@dataclass(frozen=True)
class FieldNode:
    """Represents a single field in a schema declaration."""

    name: str
    kind: FieldKind
    required: bool = True

    # PRIMITIVE tag; for REFERENCE declared with `ref`, the stored id type
    primitive: Optional[PrimitiveTag] = None

    # ARRAY element node, or NESTED field tree
    child: Optional[Union["FieldNode", "FieldTree"]] = None

    # REFERENCE: schema name, looked up lazily in the SchemaNameRegistry
    target: Optional[str] = None
    via_ref: bool = False

    # ENUM_LITERAL allowed values, in declaration order
    literals: Tuple[EnumValue, ...] = ()

    def with_changes(self, **changes: Any) -> "FieldNode":
        """Return a copy of this node with some attributes replaced."""
        values = {
            "name": self.name,
            "kind": self.kind,
            "required": self.required,
            "primitive": self.primitive,
            "child": self.child,
            "target": self.target,
            "via_ref": self.via_ref,
            "literals": self.literals,
        }
        values.update(changes)
        return FieldNode(**values)

    @property
    def element(self) -> Optional["FieldNode"]:
        """Array element node."""
        return self.child if self.kind == FieldKind.ARRAY else None

    @property
    def nested(self) -> Optional["FieldTree"]:
        """Nested field tree."""
        return self.child if self.kind == FieldKind.NESTED else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for diagnostics."""
        data: Dict[str, Any] = {"kind": self.kind.value, "required": self.required}
        if self.primitive is not None:
            data["type"] = self.primitive.value
        if self.kind == FieldKind.REFERENCE:
            data["target"] = self.target
            data["via_ref"] = self.via_ref
        if self.kind == FieldKind.ENUM_LITERAL:
            data["values"] = list(self.literals)
        if self.kind == FieldKind.ARRAY and self.child is not None:
            data["element"] = self.child.to_dict()
        if self.kind == FieldKind.NESTED and self.child is not None:
            data["fields"] = self.child.to_dict()
        return data


class FieldTree:
    """Ordered mapping from field name to FieldNode."""

    def __init__(self, fields: Optional[List[FieldNode]] = None):
        self._fields: Dict[str, FieldNode] = {}
        for node in fields or []:
            self.add_field(node)

    def add_field(self, node: FieldNode) -> None:
        """Add a field; a later declaration of the same name replaces it."""
        if node.name in self._fields:
            logger.debug("Duplicate field '%s', keeping the last declaration", node.name)
            del self._fields[node.name]
        self._fields[node.name] = node

    def get_field(self, name: str) -> Optional[FieldNode]:
        """Get field by name."""
        return self._fields.get(name)

    def names(self) -> List[str]:
        return list(self._fields)

    def __iter__(self) -> Iterator[FieldNode]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldTree):
            return NotImplemented
        return list(self._fields.items()) == list(other._fields.items())

    def __repr__(self) -> str:
        return f"FieldTree({self.names()!r})"

    def max_depth(self, current_depth: int = 1) -> int:
        """Get maximum nesting depth of this tree."""
        max_depth = current_depth
        for node in self:
            inner = node
            while inner.kind == FieldKind.ARRAY and inner.child is not None:
                inner = inner.child
            if inner.kind == FieldKind.NESTED and inner.child is not None:
                max_depth = max(max_depth, inner.child.max_depth(current_depth + 1))
        return max_depth

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for diagnostics."""
        return {name: node.to_dict() for name, node in self._fields.items()}


@dataclass
class SchemaDeclaration:
    """One schema declaration as it moves through the pipeline."""

    path: str
    source_text: str
    normalized_text: Optional[str] = None
    field_tree: Optional[FieldTree] = None


class SchemaNameRegistry:
    """
    Read-only map of schema base names to generated interface names.

    Built once from every discovered model file before any conversion runs.
    """

    def __init__(self, names: Optional[Mapping[str, str]] = None):
        self._names = MappingProxyType(dict(names or {}))
        self._folded = MappingProxyType(
            {base.lower(): interface for base, interface in self._names.items()}
        )

    def resolve(self, name: str) -> Optional[str]:
        """
        Resolve a schema name to its interface name.

        An exact match wins over a case-insensitive one.

        Returns:
            Interface name, or None when the name is unknown
        """
        if name in self._names:
            return self._names[name]
        return self._folded.get(name.lower())

    @property
    def names(self) -> Mapping[str, str]:
        return self._names

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __repr__(self) -> str:
        return f"SchemaNameRegistry({dict(self._names)!r})"


def is_options_object(value: Dict[str, Any]) -> bool:
    """
    Whether an object literal is a field-options object.

    It is when it has a ``type`` key, unless that key is itself a field
    declared with an options object (``{ type: { type: String } }``).
    """
    if "type" not in value:
        return False
    inner = value["type"]
    return not (isinstance(inner, dict) and "type" in inner)


def build_field_tree(literal: Dict[str, Any], context: str = "") -> FieldTree:
    """
    Convert a normalized schema literal into a FieldTree.

    Args:
        literal: Parsed object literal (field name -> normalized value)
        context: Dotted path of the enclosing field, for log messages

    Returns:
        FieldTree in declaration order
    """
    tree = FieldTree()
    for name, value in literal.items():
        node = build_field_node(name, value, context)
        if node is None:
            logger.warning(
                "Skipping field '%s%s': %r is not a type declaration",
                f"{context}." if context else "",
                name,
                value,
            )
            continue
        tree.add_field(node)
    return tree


def build_field_node(name: str, value: Any, context: str = "") -> Optional[FieldNode]:
    """
    Convert one normalized field value into a FieldNode.

    Returns:
        FieldNode, or None when the value does not declare a type
    """
    path = f"{context}.{name}" if context else name

    if isinstance(value, str):
        tag = _TAGS_BY_NAME.get(value.lower()) if value else PrimitiveTag.STRING
        if tag is not None:
            return FieldNode(name=name, kind=FieldKind.PRIMITIVE, primitive=tag)
        return FieldNode(name=name, kind=FieldKind.REFERENCE, target=value)

    if isinstance(value, list):
        return _build_array(name, value, path)

    if isinstance(value, dict):
        if not value:
            return FieldNode(name=name, kind=FieldKind.PRIMITIVE, primitive=PrimitiveTag.MIXED)
        if is_options_object(value):
            base = build_field_node(name, value["type"], context)
            if base is None:
                return None
            return _apply_options(base, value, path)
        return FieldNode(
            name=name, kind=FieldKind.NESTED, child=build_field_tree(value, path)
        )

    return None


def _build_array(name: str, items: List[Any], path: str) -> FieldNode:
    element = None
    if len(items) > 1 and all(isinstance(item, str) for item in items):
        # A list of literal values without an `enum` option
        element = FieldNode(name="element", kind=FieldKind.PRIMITIVE, primitive=PrimitiveTag.STRING)
    elif items:
        if len(items) > 1:
            logger.debug("Array type of '%s' lists several elements, using the first", path)
        element = build_field_node("element", items[0], path)
    if element is None:
        element = FieldNode(name="element", kind=FieldKind.PRIMITIVE, primitive=PrimitiveTag.MIXED)
    return FieldNode(name=name, kind=FieldKind.ARRAY, child=element)


def _apply_options(node: FieldNode, options: Dict[str, Any], path: str) -> FieldNode:
    """Apply `required`, `ref` and `enum` options to a field's base node."""
    if _is_explicitly_optional(options.get("required")):
        node = node.with_changes(required=False)

    ref = options.get("ref")
    if isinstance(ref, str) and ref:
        node = _map_leaf(node, lambda leaf: _as_reference(leaf, ref))

    enum_values = _enum_literals(options.get("enum"))
    if enum_values:
        node = _map_leaf(node, lambda leaf: _as_enum(leaf, enum_values, path))

    return node


def _map_leaf(node: FieldNode, transform) -> FieldNode:
    """Apply a transform to a node, or to the innermost element of an array."""
    if node.kind == FieldKind.ARRAY and node.child is not None:
        return node.with_changes(child=_map_leaf(node.child, transform))
    return transform(node)


def _as_reference(node: FieldNode, ref: str) -> FieldNode:
    if node.kind != FieldKind.PRIMITIVE:
        return node
    return node.with_changes(kind=FieldKind.REFERENCE, target=ref, via_ref=True)


def _as_enum(node: FieldNode, values: Tuple[EnumValue, ...], path: str) -> FieldNode:
    if node.kind != FieldKind.PRIMITIVE:
        return node
    if node.primitive == PrimitiveTag.STRING and all(isinstance(v, str) for v in values):
        return node.with_changes(kind=FieldKind.ENUM_LITERAL, literals=values)
    if node.primitive == PrimitiveTag.NUMBER and all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in values
    ):
        return node.with_changes(kind=FieldKind.ENUM_LITERAL, literals=values)
    logger.debug("Ignoring enum of '%s': values do not match the field type", path)
    return node


def _enum_literals(value: Any) -> Tuple[EnumValue, ...]:
    """Literal values of an `enum` option: a list, or `{ values: [...] }`."""
    if isinstance(value, dict):
        value = value.get("values")
    if not isinstance(value, list) or not value:
        return ()
    if not all(isinstance(v, (str, int, float)) and not isinstance(v, bool) for v in value):
        return ()
    return tuple(dict.fromkeys(value))


def _is_explicitly_optional(required: Any) -> bool:
    # `required: false` or `required: [false, "message"]`
    if isinstance(required, list) and required:
        required = required[0]
    return required is False


def schema_base_name(path: Union[str, Path]) -> str:
    """
    Derive a schema's base name from its model file path.

    ``models/user.model.js`` -> ``user``; ``BlogPost.ts`` -> ``BlogPost``.
    The result is not yet case-converted.
    """
    name = Path(path).name
    return name.split(".", 1)[0] or name
