from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional

import pytest

from swagger_gen.errors import UnsupportedTypeError
from swagger_gen.reflect.kinds import Int32, Int64
from swagger_gen.reflect.parameters import ParameterExtractor, enum_values, for_each_field
from swagger_gen.reflect.registry import DefinitionRegistry
from swagger_gen.reflect.synthesizer import SchemaSynthesizer
from swagger_gen.reflect.types import Enumer, ParameterProvider, tags
from swagger_gen.schema.base import ParamObj


@dataclass
class PetsRequest:
    labels: list[str] = field(
        default_factory=list,
        metadata=tags(schema="tags", in_="query", description="tags to filter by"),
    )
    limit: Int32 = field(
        default=0,
        metadata=tags(schema="limit", in_="query", description="maximum number of results to return"),
    )


@dataclass
class LocationRequest:
    q: str = field(default="", metadata=tags(query="q"))
    upload: str = field(default="", metadata=tags(form="upload"))
    pet_id: Int64 = field(default=0, metadata=tags(path="petId", binding="required"))
    ignored: str = ""
    suppressed: str = field(default="", metadata=tags(query="-"))
    token: str = field(default="", metadata=tags(schema="X-Token", in_="header", binding="omitempty;required"))
    since: str = field(default="", metadata=tags(query="since", swgen_type="date-time"))


@dataclass
class Paging:
    page: int = field(default=1, metadata=tags(query="page"))
    size: int = field(default=20, metadata=tags(query="size"))


@dataclass
class Filter:
    status: str = field(default="", metadata=tags(query="status"))


@dataclass
class SearchRequest:
    term: str = field(default="", metadata=tags(query="term"))
    paging: Paging = field(default_factory=Paging)
    filter: Optional[Filter] = None


class Color(str, Enum):
    RED = "red"
    GREEN = "green"


class Status(str):
    @classmethod
    def enum_slices(cls):
        return ["active", "retired"], ["Active", "Retired"]


@dataclass
class EnumRequest:
    color: Color = field(default=Color.RED, metadata=tags(query="color"))
    status: Status = field(default=Status("active"), metadata=tags(query="status"))


@dataclass
class Target:
    id: int = field(default=0, metadata=tags(json="id"))


@dataclass
class StructParamRequest:
    target: Target = field(default_factory=Target, metadata=tags(query="target"))


@dataclass
class StructListRequest:
    targets: list[Target] = field(default_factory=list, metadata=tags(query="targets"))


@dataclass
class NestedListRequest:
    matrix: list[list[int]] = field(default_factory=list, metadata=tags(query="matrix"))


@dataclass
class MapRequest:
    extra: dict[str, str] = field(default_factory=dict, metadata=tags(query="extra"))


class CustomParams(ParameterProvider):
    @classmethod
    def swagger_parameters(cls):
        return "Custom", [ParamObj(name="x", in_="query", type="string")]


@dataclass
class Version:
    major: int = 1
    minor: int = 0

    @classmethod
    def unmarshal_text(cls, text: str) -> "Version":
        major, minor = text.split(".")
        return cls(int(major), int(minor))


@dataclass
class VersionRequest:
    version: Version = field(default_factory=Version, metadata=tags(query="version"))
    accepted: list[Version] = field(default_factory=list, metadata=tags(query="accepted"))


class Shade(str):
    def enum_slices(self):
        return ["light", "dark"], ["Light", "Dark"]


@dataclass
class LiteralRequest:
    mode: Literal["fast", "slow"] = field(default="fast", metadata=tags(query="mode"))
    shade: Shade = field(default=Shade("light"), metadata=tags(query="shade"))


class FormParams:
    def __init__(self, prefix: str = "form"):
        self.prefix = prefix

    def swagger_parameters(self):
        return "Form", [ParamObj(name=f"{self.prefix}_id", in_="formData", type="integer")]


@pytest.fixture
def extractor():
    return ParameterExtractor(SchemaSynthesizer(DefinitionRegistry()))


class TestExtract:
    def test_query_array_parameter(self, extractor):
        name, params = extractor.extract(PetsRequest)
        assert name == "PetsRequest"
        assert [p.model_dump(by_alias=True, exclude_none=True) for p in params] == [
            {
                "name": "tags",
                "in": "query",
                "description": "tags to filter by",
                "type": "array",
                "items": {"type": "string"},
                "collectionFormat": "multi",
            },
            {
                "name": "limit",
                "in": "query",
                "description": "maximum number of results to return",
                "type": "integer",
                "format": "int32",
            },
        ]

    def test_instance_is_accepted(self, extractor):
        name, params = extractor.extract(PetsRequest())
        assert name == "PetsRequest"
        assert len(params) == 2

    def test_locations_and_required(self, extractor):
        _, params = extractor.extract(LocationRequest)
        by_name = {p.name: p for p in params}

        assert [p.name for p in params] == ["q", "upload", "petId", "X-Token", "since"]
        assert by_name["q"].in_ == "query"
        assert by_name["upload"].in_ == "formData"
        assert by_name["petId"].in_ == "path"
        assert by_name["petId"].required is True
        assert (by_name["petId"].type, by_name["petId"].format) == ("integer", "int64")
        assert by_name["X-Token"].in_ == "header"
        assert by_name["X-Token"].required is True
        assert by_name["q"].required is False
        assert (by_name["since"].type, by_name["since"].format) == ("string", "date-time")

    def test_nested_structs_are_flattened(self, extractor):
        _, params = extractor.extract(SearchRequest)
        assert [p.name for p in params] == ["term", "page", "size", "status"]

    def test_enum_values(self, extractor):
        _, params = extractor.extract(EnumRequest)
        color, status = params
        assert color.enum == ["red", "green"]
        assert color.enum_names == ["RED", "GREEN"]
        assert color.type == "string"
        assert status.enum == ["active", "retired"]
        assert status.enum_names == ["Active", "Retired"]

    def test_parameter_hook_is_used(self, extractor):
        name, params = extractor.extract(CustomParams)
        assert name == "Custom"
        assert params[0].name == "x"

    def test_text_dataclass_is_a_string_parameter(self, extractor):
        _, params = extractor.extract(VersionRequest)
        version, accepted = params
        assert (version.name, version.type) == ("version", "string")
        assert accepted.type == "array"
        assert accepted.items.type == "string"
        assert len(extractor.synthesizer.registry) == 0

    def test_literal_values_become_enum(self, extractor):
        _, params = extractor.extract(LiteralRequest)
        mode, shade = params
        assert mode.type == "string"
        assert mode.enum == ["fast", "slow"]
        assert mode.enum_names == ["fast", "slow"]
        assert shade.enum == ["light", "dark"]
        assert shade.enum_names == ["Light", "Dark"]

    def test_instance_method_parameter_hook(self, extractor):
        name, params = extractor.extract(FormParams("user"))
        assert name == "Form"
        assert [(p.name, p.in_) for p in params] == [("user_id", "formData")]

    def test_instance_method_parameter_hook_needs_instance(self, extractor):
        with pytest.raises(UnsupportedTypeError, match="needs an instance"):
            extractor.extract(FormParams)


class TestUnsupportedParameters:
    def test_struct_field_is_rejected(self, extractor):
        with pytest.raises(UnsupportedTypeError, match="target"):
            extractor.extract(StructParamRequest)
        assert len(extractor.synthesizer.registry) == 0

    def test_array_of_structs_is_rejected(self, extractor):
        with pytest.raises(UnsupportedTypeError, match="targets"):
            extractor.extract(StructListRequest)
        assert len(extractor.synthesizer.registry) == 0

    def test_nested_array_is_rejected(self, extractor):
        with pytest.raises(UnsupportedTypeError, match="nested arrays"):
            extractor.extract(NestedListRequest)

    def test_map_is_rejected(self, extractor):
        with pytest.raises(UnsupportedTypeError, match="scalar"):
            extractor.extract(MapRequest)

    def test_non_dataclass_is_rejected(self, extractor):
        with pytest.raises(UnsupportedTypeError, match="dataclass"):
            extractor.extract(dict)


class TestForEachField:
    def test_children_are_visited_before_struct_field(self):
        visited = []
        for_each_field(SearchRequest, lambda f: visited.append(f.name) or True)
        assert visited == ["term", "page", "size", "paging", "status", "filter"]

    def test_callback_can_stop_current_struct(self):
        visited = []

        def stop_at_page(f):
            visited.append(f.name)
            return f.name != "page"

        for_each_field(SearchRequest, stop_at_page)
        assert visited == ["term", "page", "paging", "status", "filter"]


class TestEnumValues:
    def test_plain_type_has_no_enum(self):
        assert enum_values(str) is None

    def test_optional_enum(self):
        assert enum_values(Optional[Color]) == (["red", "green"], ["RED", "GREEN"])

    def test_enumer_hook(self):
        class Level(Enumer):
            @classmethod
            def enum_slices(cls):
                return (1, 2, 3), ("low", "mid", "high")

        assert enum_values(Level) == ([1, 2, 3], ["low", "mid", "high"])
