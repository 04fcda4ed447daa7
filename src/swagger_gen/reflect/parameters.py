"""Parameter extraction: flatten a parameter dataclass into Swagger parameter objects."""

import logging
from collections.abc import Callable
from typing import Any, get_args

from swagger_gen.errors import UnsupportedTypeError
from swagger_gen.reflect.kinds import schema_from_common_name
from swagger_gen.reflect.synthesizer import SchemaSynthesizer, type_and_value
from swagger_gen.reflect.types import (
    MISSING,
    FieldDescriptor,
    call_hook,
    capability,
    is_enum,
    is_literal,
    is_struct,
    is_text_type,
    python_type_name,
    sequence_item,
    strip_annotated,
    strip_optional,
    struct_fields,
)
from swagger_gen.schema.base import ParamItemObj, ParamObj, SchemaObj

logger = logging.getLogger(__name__)

COLLECTION_FORMAT_MULTI = "multi"

# Name tags in priority order, with the location each one implies.
_LOCATION_TAGS = (
    ("query", "query"),
    ("form", "formData"),
    ("schema", "query"),
    ("path", "path"),
)

_SCALAR_TYPES = frozenset({"boolean", "integer", "number", "string"})


def for_each_field(tp: Any, callback: Callable[[FieldDescriptor], bool]) -> None:
    """Visit the exported fields of a dataclass, children of struct fields first.

    A struct-typed field is recursed into before the callback sees the field
    itself. The callback returns False to stop visiting the current struct.
    """
    for field in struct_fields(tp):
        if not field.exported:
            continue
        field_type = strip_annotated(strip_optional(field.type))
        if is_struct(field_type) and not is_text_type(field_type):
            for_each_field(field_type, callback)
        if not callback(field):
            return


def enum_values(tp: Any, value: Any = None) -> tuple[list[Any], list[str]] | None:
    """Legal values and display names of an enumerable field type.

    An ``enum_slices`` hook is called on ``value`` when it is an instance of
    the type, otherwise on the type.
    """
    tp = strip_annotated(strip_optional(tp))
    if capability(tp, "enum_slices") is not None:
        values, names = call_hook(tp, value, "enum_slices")
        return list(values), list(names)
    if is_enum(tp):
        return [member.value for member in tp], [member.name for member in tp]
    if is_literal(tp):
        values = list(get_args(tp))
        return values, [str(v) for v in values]
    return None


class ParameterExtractor:
    """Builds the parameter list of an operation from a parameter dataclass."""

    def __init__(self, synthesizer: SchemaSynthesizer, reflect_types: bool = False):
        self.synthesizer = synthesizer
        self.reflect_types = reflect_types

    def extract(self, obj: Any) -> tuple[str, list[ParamObj]]:
        """Return ``(struct name, parameters)`` for a parameter dataclass or instance."""
        tp, value = type_and_value(obj)
        tp = strip_optional(tp)
        if capability(tp, "swagger_parameters") is not None:
            return call_hook(tp, value, "swagger_parameters")

        mapped = self.synthesizer.type_map.get(tp)
        if mapped is not None:
            return self.extract(mapped)
        if not is_struct(tp):
            raise UnsupportedTypeError(f"parameters must be a dataclass, got {python_type_name(tp)}")

        struct_name = getattr(tp, "__name__", python_type_name(tp))
        params: list[ParamObj] = []

        def visit(field: FieldDescriptor) -> bool:
            param = self._parameter(struct_name, field)
            if param is not None:
                params.append(param)
            return True

        for_each_field(tp, visit)
        logger.debug("Extracted %d parameters from %s", len(params), struct_name)
        return struct_name, params

    def _parameter(self, struct_name: str, field: FieldDescriptor) -> ParamObj | None:
        name_tag, location = _name_and_location(field)
        if not name_tag:
            return None

        param = ParamObj(name=name_tag.split(",")[0], in_=location)
        if self.reflect_types:
            param.add_extended_field("x-python-name", field.name)
            param.add_extended_field("x-python-type", python_type_name(field.type))

        default = field.default_value()
        enum = enum_values(field.type, None if default is MISSING else default)
        if enum is not None:
            param.enum, param.enum_names = enum

        description = field.tag("description")
        if description and description != "-":
            param.description = description

        bindings = [rule.strip() for rule in field.tag("binding").split(";")]
        param.required = "required" in bindings

        in_tag = field.tag("in")
        if in_tag and in_tag != "-":
            param.in_ = in_tag

        schema = self._schema(struct_name, field)
        param.type = schema.type
        param.format = schema.format
        if schema.type == "array":
            items = schema.items
            if items is None or items.ref or items.type not in _SCALAR_TYPES:
                raise UnsupportedTypeError(
                    f"field {field.name} of parameter struct {struct_name}: "
                    "arrays of structs and nested arrays are not supported"
                )
            param.items = ParamItemObj(type=items.type, format=items.format)
            param.collection_format = COLLECTION_FORMAT_MULTI
        return param

    def _schema(self, struct_name: str, field: FieldDescriptor) -> SchemaObj:
        type_hint = field.tag("swgen_type")
        if type_hint:
            return schema_from_common_name(type_hint)

        # Reject named types before synthesizing, so no definition gets registered for them.
        synthesizer = self.synthesizer
        if synthesizer.produces_reference(field.type):
            raise UnsupportedTypeError(
                f"field {field.name} of parameter struct {struct_name}: struct types are not supported"
            )
        item_type = sequence_item(synthesizer.resolve(field.type))
        if item_type is not MISSING and synthesizer.produces_reference(item_type):
            raise UnsupportedTypeError(
                f"field {field.name} of parameter struct {struct_name}: "
                "arrays of structs and nested arrays are not supported"
            )

        schema = synthesizer.synthesize(field.type)
        if schema.ref or (schema.type not in _SCALAR_TYPES and schema.type != "array"):
            raise UnsupportedTypeError(
                f"field {field.name} of parameter struct {struct_name}: "
                f"{python_type_name(field.type)} does not resolve to a scalar"
            )
        return schema


def _name_and_location(field: FieldDescriptor) -> tuple[str, str]:
    for tag_name, location in _LOCATION_TAGS:
        value = field.tag(tag_name)
        if value and value != "-":
            return value, location
    return "", ""
