"""Data models for the emitted Swagger 2.0 schema and parameter objects.

The reflection engine builds these models; the document generator
serializes them by alias with unset values omitted.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer

REF_DEFINITION_PREFIX = "#/definitions/"


class Extensible(BaseModel):
    """Base for objects carrying vendor extension fields (``x-...``)."""

    model_config = ConfigDict(populate_by_name=True)

    extensions: dict[str, Any] = Field(default_factory=dict, exclude=True)

    def add_extended_field(self, name: str, value: Any) -> None:
        self.extensions[name] = value

    @model_serializer(mode="wrap")
    def serialize_with_extensions(self, handler):
        data = handler(self)
        data.update(self.extensions)
        return data


class SchemaObj(Extensible):
    """A schema object: an inline schema, a canonical definition or a reference stub."""

    ref: str | None = Field(None, alias="$ref")
    type: str | None = None
    format: str | None = None
    description: str | None = None
    properties: dict[str, "SchemaObj"] | None = None
    items: "SchemaObj | None" = None
    additional_properties: "SchemaObj | None" = Field(None, alias="additionalProperties")
    enum: list[Any] | None = None
    default: Any = None
    type_name: str = Field("", exclude=True)  # key under /definitions, never serialized

    def export(self) -> "SchemaObj":
        """Return a reference stub pointing at this definition."""
        return SchemaObj(ref=REF_DEFINITION_PREFIX + self.type_name, type_name=self.type_name)

    def is_empty(self) -> bool:
        return not (
            self.ref or self.type or self.properties or self.items or self.additional_properties
        )


class ParamItemObj(BaseModel):
    """Item type of a multi-value parameter."""

    type: str
    format: str | None = None


class ParamObj(Extensible):
    """A single operation parameter (query, path, formData or body)."""

    name: str
    in_: str = Field("query", alias="in")
    description: str | None = None
    required: bool = False
    type: str | None = None
    format: str | None = None
    items: ParamItemObj | None = None
    collection_format: str | None = Field(None, alias="collectionFormat")
    enum: list[Any] | None = None
    enum_names: list[str] | None = Field(None, alias="x-enum-names")
    schema_: SchemaObj | None = Field(None, alias="schema")

    @model_serializer(mode="wrap")
    def serialize_with_extensions(self, handler):
        data = handler(self)
        if not self.required:
            data.pop("required", None)
        data.update(self.extensions)
        return data
