"""
SchemaNode - mutable, tree-shaped contract fragment.

Built fresh per version per build pass from the JSON Schema pydantic generates,
then mutated in place by the type fixers and the rule mapper, and finally encoded
as an OpenAPI 3.0 schema object.

Type is a set so nullability can be expressed ({"integer", "null"}). OpenAPI 3.0
allows a single declared type per node: with more than one non-null type the
encoder omits `type` entirely, which is why the numeric fixer exists.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set

from ..utils.naming import lower_first


# Closed set of schema types, in encoding order
SCHEMA_TYPES = ("integer", "number", "boolean", "string", "object", "array", "null")

REF_PREFIX = "#/components/schemas/"

_MISSING = object()


def _json_number(value):
    """Decimal bounds are encoded as plain JSON numbers."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _ref_name(ref: str) -> str:
    return ref.rsplit("/", 1)[-1]


@dataclass(eq=False)
class SchemaNode:
    types: Set[str] = field(default_factory=set)
    format: Optional[str] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[Any] = None
    maximum: Optional[Any] = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    enum: Optional[List[Any]] = None
    description: Optional[str] = None
    default: Any = _MISSING
    required: List[str] = field(default_factory=list)
    properties: Dict[str, "SchemaNode"] = field(default_factory=dict)
    items: Optional["SchemaNode"] = None
    additional_properties: Optional["SchemaNode"] = None
    any_of: List["SchemaNode"] = field(default_factory=list)
    ref: Optional[str] = None
    # Python class the node describes (model or enum), when known. Not encoded.
    python_type: Optional[type] = None

    # -------------------------------------------------------------------------
    # Mutation helpers
    # -------------------------------------------------------------------------

    @property
    def nullable(self) -> bool:
        return "null" in self.types

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    @property
    def is_simple(self) -> bool:
        """No structure of its own: only type flags and scalar constraints."""
        return not (self.properties or self.items or self.additional_properties
                    or self.any_of or self.ref)

    def add_required(self, name: str) -> None:
        if name not in self.required:
            self.required.append(name)

    def append_description(self, text: str) -> None:
        """Descriptions accumulate with ". " between entries, never overwrite."""
        if not self.description:
            self.description = text
        else:
            self.description = f"{self.description}. {text}"

    def find_property(self, member: str) -> Optional[str]:
        """
        Property name matching a rule member name.

        Tries the first-letter-lowercased form ("UnitPrice" -> "unitPrice") first,
        then any case-insensitive match.
        """
        if not self.properties:
            return None
        candidate = lower_first(member)
        if candidate in self.properties:
            return candidate
        folded = member.casefold()
        for name in self.properties:
            if name.casefold() == folded:
                return name
        return None

    def walk(self) -> Iterator["SchemaNode"]:
        """Depth-first over this node and every nested node."""
        yield self
        for child in self.properties.values():
            yield from child.walk()
        if self.items is not None:
            yield from self.items.walk()
        if self.additional_properties is not None:
            yield from self.additional_properties.walk()
        for branch in self.any_of:
            yield from branch.walk()

    # -------------------------------------------------------------------------
    # JSON Schema -> SchemaNode
    # -------------------------------------------------------------------------

    @classmethod
    def from_json_schema(
        cls,
        data: Mapping[str, Any],
        defs: Optional[Mapping[str, Any]] = None,
        type_lookup: Optional[Mapping[str, type]] = None,
    ) -> "SchemaNode":
        """
        Convert a pydantic-generated JSON Schema into a SchemaNode tree.

        Args:
            data: JSON Schema object
            defs: The "$defs" section; references into it are inlined
            type_lookup: Definition name -> Python class, used to tag nodes

        Returns:
            Root SchemaNode; recursive references are kept as refs
        """
        return _Converter(defs or {}, type_lookup or {}).convert(data, ())

    # -------------------------------------------------------------------------
    # SchemaNode -> OpenAPI 3.0
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        if self.ref is not None:
            out: Dict[str, Any] = {"$ref": f"{REF_PREFIX}{self.ref}"}
            if self.nullable:
                # $ref siblings are ignored in 3.0; wrap to keep nullability
                return {"allOf": [out], "nullable": True}
            return out

        out = {}
        non_null = [t for t in SCHEMA_TYPES if t in self.types and t != "null"]
        if len(non_null) == 1:
            out["type"] = non_null[0]
        if self.nullable:
            out["nullable"] = True
        if self.format is not None:
            out["format"] = self.format
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.pattern is not None:
            out["pattern"] = self.pattern
        if self.min_length is not None:
            out["minLength"] = self.min_length
        if self.max_length is not None:
            out["maxLength"] = self.max_length
        if self.minimum is not None:
            out["minimum"] = _json_number(self.minimum)
            if self.exclusive_minimum:
                out["exclusiveMinimum"] = True
        if self.maximum is not None:
            out["maximum"] = _json_number(self.maximum)
            if self.exclusive_maximum:
                out["exclusiveMaximum"] = True
        if self.description:
            out["description"] = self.description
        if self.default is not _MISSING:
            out["default"] = self.default
        if self.required:
            out["required"] = list(self.required)
        if self.properties:
            out["properties"] = {name: node.to_dict() for name, node in self.properties.items()}
        if self.items is not None:
            out["items"] = self.items.to_dict()
        if self.additional_properties is not None:
            out["additionalProperties"] = self.additional_properties.to_dict()
        if self.any_of:
            out["anyOf"] = [branch.to_dict() for branch in self.any_of]
        return out


class _Converter:
    def __init__(self, defs: Mapping[str, Any], type_lookup: Mapping[str, type]):
        self.defs = defs
        self.type_lookup = type_lookup

    def convert(self, data: Mapping[str, Any], stack: tuple) -> SchemaNode:
        if "$ref" in data:
            node = self._resolve(data["$ref"], stack)
            self._overlay(node, data)
            return node

        all_of = data.get("allOf")
        if all_of and len(all_of) == 1:
            node = self.convert(all_of[0], stack)
            self._overlay(node, data)
            return node

        branches = data.get("anyOf") or data.get("oneOf")
        if branches:
            node = self._merge_branches([self.convert(b, stack) for b in branches])
            self._overlay(node, data)
            return node

        node = SchemaNode()
        self._apply_keywords(node, data)

        required = data.get("required") or []
        for name, prop in (data.get("properties") or {}).items():
            node.properties[name] = self.convert(prop, stack)
        node.required = [name for name in required if name in node.properties]

        if isinstance(data.get("items"), Mapping):
            node.items = self.convert(data["items"], stack)
        if isinstance(data.get("additionalProperties"), Mapping):
            node.additional_properties = self.convert(data["additionalProperties"], stack)
        return node

    def _resolve(self, ref: str, stack: tuple) -> SchemaNode:
        name = _ref_name(ref)
        python_type = self.type_lookup.get(name)
        if name in stack or name not in self.defs:
            return SchemaNode(ref=name, python_type=python_type)
        node = self.convert(self.defs[name], stack + (name,))
        node.python_type = python_type
        return node

    def _merge_branches(self, branches: List[SchemaNode]) -> SchemaNode:
        nulls = [b for b in branches if b.types == {"null"} and b.is_simple]
        others = [b for b in branches if b not in nulls]

        if len(others) == 1:
            node = others[0]
            if nulls:
                node.types.add("null")
            return node

        if others and all(b.is_simple for b in others):
            merged = SchemaNode()
            for branch in branches:
                merged.types |= branch.types
                for attr in ("format", "pattern", "min_length", "max_length", "minimum",
                             "maximum", "enum", "description", "python_type"):
                    if getattr(merged, attr) is None and getattr(branch, attr) is not None:
                        setattr(merged, attr, getattr(branch, attr))
                merged.exclusive_minimum = merged.exclusive_minimum or branch.exclusive_minimum
                merged.exclusive_maximum = merged.exclusive_maximum or branch.exclusive_maximum
            return merged

        node = SchemaNode(any_of=others)
        if nulls:
            node.types.add("null")
        return node

    def _overlay(self, node: SchemaNode, data: Mapping[str, Any]) -> None:
        """Keywords next to $ref/anyOf (description, default, format) win."""
        if "description" in data:
            node.description = data["description"]
        if "default" in data:
            node.default = data["default"]
        if "format" in data:
            node.format = data["format"]

    def _apply_keywords(self, node: SchemaNode, data: Mapping[str, Any]) -> None:
        declared = data.get("type")
        if isinstance(declared, str):
            declared = [declared]
        node.types = {t for t in (declared or []) if t in SCHEMA_TYPES}

        if "enum" in data:
            node.enum = list(data["enum"])
        elif "const" in data:
            node.enum = [data["const"]]

        node.format = data.get("format")
        node.pattern = data.get("pattern")
        node.min_length = data.get("minLength")
        node.max_length = data.get("maxLength")
        node.description = data.get("description")
        if "default" in data:
            node.default = data["default"]

        # JSON Schema 2020-12 numeric exclusivity -> OpenAPI 3.0 boolean flags
        if "minimum" in data:
            node.minimum = data["minimum"]
        if isinstance(data.get("exclusiveMinimum"), (int, float, Decimal)) and not isinstance(
                data.get("exclusiveMinimum"), bool):
            node.minimum = data["exclusiveMinimum"]
            node.exclusive_minimum = True
        if "maximum" in data:
            node.maximum = data["maximum"]
        if isinstance(data.get("exclusiveMaximum"), (int, float, Decimal)) and not isinstance(
                data.get("exclusiveMaximum"), bool):
            node.maximum = data["exclusiveMaximum"]
            node.exclusive_maximum = True
