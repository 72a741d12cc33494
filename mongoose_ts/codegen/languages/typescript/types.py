"""
TypeScript-specific type system for code generation.

Maps materialized field trees to an immutable TypeScript type model,
resolving schema references against the run's SchemaNameRegistry.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from ...core.schema import (
    EnumValue,
    FieldKind,
    FieldNode,
    FieldTree,
    PrimitiveTag,
    SchemaNameRegistry,
)


class TSKind(Enum):
    """Kinds of TypeScript types produced by the mapper."""

    PRIMITIVE = "primitive"  # string, number, Date, ObjectId, any...
    NAMED = "named"  # Generated interface of another schema
    ARRAY = "array"
    OBJECT = "object"  # Inline structural type
    ENUM = "enum"  # Union of literal types
    UNION = "union"
    UNRESOLVED = "unresolved"


class RefStyle(Enum):
    """How fields declared with explicit `ref` metadata are typed."""

    INTERFACE = "interface"  # IUser
    UNION = "union"  # ObjectId | IUser
    ID = "id"  # ObjectId


@dataclass(frozen=True)
class TSType:
    """
    Immutable representation of a TypeScript type with its metadata.

    Carries everything the renderer needs: structure, the named imports
    the type relies on and any warnings raised while mapping it.
    """

    kind: TSKind
    name: str = ""  # Primitive or interface name; declared name when unresolved
    element: Optional["TSType"] = None
    fields: Tuple["TSField", ...] = ()
    literals: Tuple[EnumValue, ...] = ()
    members: Tuple["TSType", ...] = ()
    imports_needed: FrozenSet[str] = frozenset()
    validation_hints: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.name:
            data["name"] = self.name
        if self.element is not None:
            data["element"] = self.element.to_dict()
        if self.kind == TSKind.OBJECT:
            data["fields"] = {f.name: f.to_dict() for f in self.fields}
        if self.literals:
            data["literals"] = list(self.literals)
        if self.members:
            data["members"] = [m.to_dict() for m in self.members]
        return data


@dataclass(frozen=True)
class TSField:
    """A property of an interface or inline object type."""

    name: str
    type: TSType
    optional: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.to_dict(), "optional": self.optional}


@dataclass
class TSInterface:
    """Type model of one schema: a named interface and its properties."""

    name: str
    fields: List[TSField] = field(default_factory=list)

    @property
    def imports_needed(self) -> Set[str]:
        return collect_imports(f.type for f in self.fields)

    @property
    def validation_hints(self) -> List[str]:
        return collect_validation_hints(f.type for f in self.fields)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for diagnostics."""
        return {
            "name": self.name,
            "fields": {f.name: f.to_dict() for f in self.fields},
        }


@dataclass
class TSTypeConfig:
    """Configuration for TypeScript type mapping behavior."""

    string_type: str = "string"
    number_type: str = "number"
    boolean_type: str = "boolean"
    date_type: str = "Date"
    object_id_type: str = "ObjectId"
    decimal_type: str = "Decimal128"
    mixed_type: str = "any"

    # Placeholder for references to unknown schemas
    unresolved_type: str = "unknown"

    ref_style: RefStyle = RefStyle.INTERFACE

    # Custom type overrides
    type_overrides: Dict[PrimitiveTag, str] = field(default_factory=dict)


# Primitive tags whose TypeScript type is imported from the bson module
BSON_TAGS = {PrimitiveTag.OBJECT_ID, PrimitiveTag.DECIMAL128}


class TSTypeMapper:
    """
    Maps field trees to TypeScript types.

    Reference resolution needs the run's SchemaNameRegistry, which is passed
    to every call; the mapper itself keeps no state between schemas.
    """

    def __init__(self, config: Optional[TSTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or TSTypeConfig()
        self._primitive_types = self._build_primitive_type_map()

    def _build_primitive_type_map(self) -> Dict[PrimitiveTag, TSType]:
        """Build mapping of primitive tags to TypeScript types."""
        names = {
            PrimitiveTag.STRING: self.config.string_type,
            PrimitiveTag.NUMBER: self.config.number_type,
            PrimitiveTag.BOOLEAN: self.config.boolean_type,
            PrimitiveTag.DATE: self.config.date_type,
            PrimitiveTag.OBJECT_ID: self.config.object_id_type,
            PrimitiveTag.DECIMAL128: self.config.decimal_type,
            PrimitiveTag.MIXED: self.config.mixed_type,
        }
        names.update(self.config.type_overrides)

        types = {}
        for tag, name in names.items():
            imports = frozenset({name}) if tag in BSON_TAGS else frozenset()
            types[tag] = TSType(kind=TSKind.PRIMITIVE, name=name, imports_needed=imports)
        return types

    def primitive_type(self, tag: PrimitiveTag) -> TSType:
        """TypeScript type of a primitive tag."""
        return self._primitive_types[tag]

    def map_interface(
        self, name: str, tree: FieldTree, registry: SchemaNameRegistry
    ) -> TSInterface:
        """
        Map a schema's field tree to an interface type model.

        Args:
            name: Interface name
            tree: Materialized field tree
            registry: All schema names known to this run

        Returns:
            TSInterface with one property per field, in declaration order
        """
        return TSInterface(name=name, fields=self.map_fields(tree, registry, name))

    def map_fields(
        self, tree: FieldTree, registry: SchemaNameRegistry, context: str = ""
    ) -> List[TSField]:
        """Map every field of a tree to a TSField."""
        return [
            TSField(
                name=node.name,
                type=self.map_field_type(node, registry, f"{context}.{node.name}"),
                optional=not node.required,
            )
            for node in tree
        ]

    def map_field_type(
        self, node: FieldNode, registry: SchemaNameRegistry, context: str = ""
    ) -> TSType:
        """
        Map a field node to a TypeScript type.

        Args:
            node: The field to map
            registry: Known schema names for reference resolution
            context: Dotted field path used in validation hints

        Returns:
            Complete TSType with all metadata
        """
        context = context or node.name

        if node.kind == FieldKind.PRIMITIVE:
            return self._primitive_types[node.primitive]

        elif node.kind == FieldKind.ARRAY:
            element = self.map_field_type(node.child, registry, f"{context}[]")
            return TSType(
                kind=TSKind.ARRAY,
                element=element,
                imports_needed=element.imports_needed,
                validation_hints=element.validation_hints,
            )

        elif node.kind == FieldKind.NESTED:
            fields = tuple(self.map_fields(node.child, registry, context))
            return TSType(
                kind=TSKind.OBJECT,
                fields=fields,
                imports_needed=frozenset(collect_imports(f.type for f in fields)),
                validation_hints=tuple(collect_validation_hints(f.type for f in fields)),
            )

        elif node.kind == FieldKind.ENUM_LITERAL:
            return TSType(kind=TSKind.ENUM, literals=node.literals)

        elif node.kind == FieldKind.REFERENCE:
            return self._map_reference(node, registry, context)

        raise ValueError(f"Unsupported field kind: {node.kind}")

    def _map_reference(
        self, node: FieldNode, registry: SchemaNameRegistry, context: str
    ) -> TSType:
        """Map a reference to another schema's interface."""
        id_type = self._primitive_types.get(node.primitive or PrimitiveTag.OBJECT_ID)

        if node.via_ref and self.config.ref_style == RefStyle.ID:
            return id_type

        interface_name = registry.resolve(node.target)
        if interface_name is None:
            return TSType(
                kind=TSKind.UNRESOLVED,
                name=node.target,
                validation_hints=(
                    f"Unresolved reference '{node.target}' in field '{context}', "
                    f"using {self.config.unresolved_type}",
                ),
            )

        named = TSType(kind=TSKind.NAMED, name=interface_name)
        if node.via_ref and self.config.ref_style == RefStyle.UNION:
            return TSType(
                kind=TSKind.UNION,
                members=(id_type, named),
                imports_needed=id_type.imports_needed,
            )
        return named


def collect_imports(types: Iterable[TSType]) -> Set[str]:
    """Extract all unique imports needed for a list of types."""
    imports: Set[str] = set()
    for ts_type in types:
        imports.update(ts_type.imports_needed)
    return imports


def collect_validation_hints(types: Iterable[TSType]) -> List[str]:
    """Get all validation hints from a list of types."""
    hints: List[str] = []
    for ts_type in types:
        hints.extend(ts_type.validation_hints)
    return hints
