"""Schema synthesizer: turns Python types into Swagger schema objects.

Structs (dataclasses) are never expanded in place. The first time one is
seen, a placeholder definition is registered and the type is queued; every
use site gets a ``$ref`` stub. Field expansion happens when the registry
queue is drained, which keeps self- and mutually-referencing types finite.
"""

import logging
from typing import Any, get_args

from pydantic import TypeAdapter

from swagger_gen.errors import UnsupportedTypeError
from swagger_gen.reflect.kinds import (
    FLOAT_KINDS,
    INTEGER_KINDS,
    UNSIGNED_KINDS,
    Kind,
    kind_of,
    schema_from_common_name,
    schema_from_kind,
)
from swagger_gen.reflect.registry import DefinitionRegistry
from swagger_gen.reflect.types import (
    MISSING,
    DefinitionProvider,
    FieldDescriptor,
    call_hook,
    capability,
    container_base,
    is_any,
    is_enum,
    is_interface,
    is_literal,
    is_named_container,
    is_struct,
    is_text_type,
    is_unsupported,
    mapping_value,
    python_type_name,
    reliable_name,
    sequence_item,
    strip_annotated,
    strip_optional,
    struct_fields,
)
from swagger_gen.schema.base import SchemaObj

logger = logging.getLogger(__name__)

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def type_and_value(obj: Any) -> tuple[Any, Any]:
    """Split a caller argument into ``(type, instance-or-None)``."""
    if isinstance(obj, type) or not _is_instance(obj):
        return obj, None
    return type(obj), obj


def _is_instance(obj: Any) -> bool:
    # typing constructs (list[Pet], Optional[Pet], Annotated[...]) are type descriptions, not values
    return type(obj).__module__ not in ("typing", "types", "typing_extensions")


def parse_default(tp: Any, literal: str) -> Any:
    """Parse a default-value tag according to the field's scalar kind.

    Raises ``ValueError`` when the literal does not fit the type.
    """
    tp = strip_annotated(strip_optional(tp))
    if is_enum(tp):
        for member in tp:
            if literal in (member.name, str(member.value)):
                return member.value
        raise ValueError(f"{literal!r} is not a member of {tp.__name__}")
    kind = kind_of(tp)
    if kind in INTEGER_KINDS:
        return int(literal, 10)
    if kind in UNSIGNED_KINDS:
        value = int(literal, 10)
        if value < 0:
            raise ValueError(f"invalid unsigned integer: {literal!r}")
        return value
    if kind in FLOAT_KINDS:
        return float(literal)
    if kind is Kind.STRING:
        return literal
    if kind is Kind.BOOL:
        if literal in _TRUE_LITERALS:
            return True
        if literal in _FALSE_LITERALS:
            return False
        raise ValueError(f"invalid boolean: {literal!r}")
    adapter = TypeAdapter(tp)
    return adapter.dump_python(adapter.validate_json(literal), mode="json")


class SchemaSynthesizer:
    """Builds inline schemas and named definitions into a ``DefinitionRegistry``."""

    def __init__(
        self,
        registry: DefinitionRegistry,
        type_map: dict[Any, Any] | None = None,
        reflect_types: bool = False,
    ):
        self.registry = registry
        self.type_map = type_map if type_map is not None else {}
        self.reflect_types = reflect_types

    def parse_definition(self, obj: Any) -> SchemaObj:
        """Schema for a top-level type or instance.

        Named types (structs, named containers, types with a
        ``swagger_definition`` hook) are registered and returned as
        references; everything else is returned inline. Queued types are
        expanded before returning.
        """
        tp, value = type_and_value(obj)
        tp = self.resolve(tp)
        if tp is not type(value):
            value = None

        # Queued types are expanded even when the top-level type fails.
        try:
            if capability(tp, "swagger_definition") is not None:
                schema = self._from_hook(tp, value)
            elif is_struct(tp):
                schema = self._top_level_struct(tp, value)
            elif is_named_container(tp):
                schema = self._named_container(tp)
            else:
                schema = self.synthesize(tp, value)
        finally:
            errors = self.registry.drain(self._expand)
        if errors:
            raise errors[0]
        return schema

    def synthesize(self, tp: Any, value: Any = None) -> SchemaObj:
        """Schema for a type at a use site: inline, or a reference for named types."""
        tp = self.resolve(tp)

        if capability(tp, "swagger_definition") is not None:
            return self._from_hook(tp, value)
        if is_any(tp):
            if value is not None and type(value) is not object:
                return self.synthesize(type(value), value)
            return SchemaObj()
        if is_enum(tp):
            return self._enum_schema([member.value for member in tp])
        if is_literal(tp):
            return self._enum_schema(list(get_args(tp)))

        kind = kind_of(tp)
        if kind is not None:
            return schema_from_kind(kind)
        if is_text_type(tp):
            return SchemaObj(type="string")
        if is_struct(tp):
            return self._reference(tp)
        if is_interface(tp):
            raise UnsupportedTypeError(f"non-empty interface is not supported: {python_type_name(tp)}")
        if is_unsupported(tp):
            raise UnsupportedTypeError(f"type is not supported: {python_type_name(tp)}")

        value_type = mapping_value(tp)
        if value_type is not MISSING:
            return SchemaObj(type="object", additional_properties=self.synthesize(value_type))
        item_type = sequence_item(tp)
        if item_type is not MISSING:
            return SchemaObj(type="array", items=self.synthesize(item_type))

        raise UnsupportedTypeError(f"type is not supported: {python_type_name(tp)}")

    def resolve(self, tp: Any) -> Any:
        """Strip Optional and Annotated wrappers and apply the type map."""
        tp = strip_annotated(strip_optional(tp))
        mapped = self.type_map.get(tp)
        if mapped is not None:
            logger.debug("Documenting %s as %s", python_type_name(tp), python_type_name(mapped))
            tp = strip_annotated(strip_optional(mapped))
        return tp

    def produces_reference(self, tp: Any) -> bool:
        """True when ``synthesize(tp)`` registers a definition and returns a ``$ref``."""
        tp = self.resolve(tp)
        if capability(tp, "swagger_definition") is not None:
            return True
        if is_any(tp) or is_enum(tp) or is_literal(tp):
            return False
        if kind_of(tp) is not None or is_text_type(tp):
            return False
        return is_struct(tp)

    def _enum_schema(self, values: list[Any]) -> SchemaObj:
        kinds = {kind_of(type(value)) for value in values}
        if len(kinds) == 1 and None not in kinds:
            schema = schema_from_kind(kinds.pop())
        else:
            schema = SchemaObj()
        schema.enum = values
        return schema

    def _placeholder(self, tp: Any) -> SchemaObj:
        definition = SchemaObj(type="object", type_name=reliable_name(tp))
        if self.reflect_types:
            definition.add_extended_field("x-python-type", python_type_name(tp))
        return definition

    def _reference(self, tp: Any) -> SchemaObj:
        # Registered or queued types take the reference path; this is what breaks cycles.
        definition = self.registry.lookup(tp)
        if definition is None:
            definition = self._placeholder(tp)
            self.registry.add(tp, definition)
            self.registry.enqueue(tp)
        return definition.export()

    def _top_level_struct(self, tp: Any, value: Any) -> SchemaObj:
        definition = self.registry.lookup(tp)
        if definition is not None:
            return definition.export()
        definition = self._placeholder(tp)
        self.registry.add(tp, definition)
        self._expand(tp, value)
        return definition.export()

    def _named_container(self, tp: type) -> SchemaObj:
        definition = self.registry.lookup(tp)
        if definition is not None:
            return definition.export()
        definition = self.synthesize(container_base(tp))
        definition.type_name = tp.__name__
        if self.reflect_types:
            definition.add_extended_field("x-python-type", python_type_name(tp))
        self.registry.add(tp, definition)
        return definition.export()

    def _from_hook(self, tp: type[DefinitionProvider], value: Any = None) -> SchemaObj:
        definition = self.registry.lookup(tp)
        if definition is not None:
            return definition.export()
        name, schema = call_hook(tp, value, "swagger_definition")
        schema.type_name = name or reliable_name(tp)
        if self.reflect_types:
            schema.add_extended_field("x-python-type", python_type_name(tp))
        self.registry.add(tp, schema)
        return schema.export()

    def _expand(self, tp: Any, value: Any = None) -> None:
        """Fill a registered placeholder with the struct's properties."""
        definition = self.registry.lookup(tp)
        logger.debug("Expanding definition %s", definition.type_name)
        try:
            definition.properties = self._properties(tp, value)
        except Exception:
            self.registry.remove(tp)
            raise

    def _properties(self, tp: Any, value: Any) -> dict[str, SchemaObj]:
        properties: dict[str, SchemaObj] = {}
        for field in struct_fields(tp):
            if not field.exported:
                continue
            field_value = getattr(value, field.name, None) if value is not None else None

            if field.embedded:
                embedded_type = strip_optional(field.type)
                if not is_struct(embedded_type):
                    raise UnsupportedTypeError(
                        f"embedded field {field.name} of {python_type_name(tp)} must be a dataclass"
                    )
                properties.update(self._properties(embedded_type, field_value))
                continue

            tag = field.tag("json")
            if tag in ("", "-"):
                continue
            name = tag.split(",")[0] or field.name
            properties[name] = self._field_schema(field, field_value)
        return properties

    def _field_schema(self, field: FieldDescriptor, field_value: Any) -> SchemaObj:
        type_hint = field.tag("swgen_type")
        if type_hint:
            schema = schema_from_common_name(type_hint)
        else:
            if field_value is None:
                default = field.default_value()
                if default is not MISSING:
                    field_value = default
            schema = self.synthesize(field.type, field_value)

        literal = field.tag("default")
        if literal:
            try:
                schema.default = parse_default(field.type, literal)
            except (ValueError, TypeError) as exc:
                logger.debug("Ignoring default %r of field %s: %s", literal, field.name, exc)
        description = field.tag("description")
        if description and not schema.ref:
            schema.description = description
        return schema
