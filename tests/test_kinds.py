from datetime import date, datetime
from typing import Annotated

import pytest

from swagger_gen.reflect.kinds import (
    CommonName,
    Float32,
    Int8,
    Int64,
    Kind,
    Uint64,
    common_name,
    kind_of,
    map_primitive,
    schema_from_common_name,
    schema_from_kind,
)


class UserId(int):
    pass


class TestKindOf:
    @pytest.mark.parametrize(
        "tp, kind",
        [
            (bool, Kind.BOOL),
            (int, Kind.INT),
            (Int8, Kind.INT8),
            (Int64, Kind.INT64),
            (Uint64, Kind.UINT64),
            (float, Kind.FLOAT64),
            (Float32, Kind.FLOAT32),
            (str, Kind.STRING),
            (bytes, Kind.BYTES),
            (bytearray, Kind.BYTES),
            (datetime, Kind.DATE_TIME),
            (date, Kind.DATE),
            (UserId, Kind.INT),
            (Annotated[str, "doc"], Kind.STRING),
        ],
    )
    def test_scalar_kinds(self, tp, kind):
        assert kind_of(tp) is kind

    def test_non_scalars(self):
        assert kind_of(list[int]) is None
        assert kind_of(dict) is None
        assert kind_of(object) is None


class TestMapPrimitive:
    def test_integer_sizes(self):
        assert map_primitive(Kind.INT32) == ("integer", "int32")
        assert map_primitive(Kind.INT64) == ("integer", "int64")
        assert map_primitive(Kind.UINT32) == ("integer", "int64")

    def test_floats(self):
        assert map_primitive(Kind.FLOAT32) == ("number", "float")
        assert map_primitive(Kind.FLOAT64) == ("number", "double")

    def test_strings_have_no_format(self):
        assert map_primitive(Kind.STRING) == ("string", "")
        assert schema_from_kind(Kind.STRING).format is None
        assert schema_from_kind(Kind.BOOL).type == "boolean"


class TestCommonNames:
    def test_aliases(self):
        assert common_name("int64") is CommonName.LONG
        assert common_name("dateTime") is CommonName.DATE_TIME
        assert common_name("password") is CommonName.PASSWORD

    def test_schema_from_common_name(self):
        schema = schema_from_common_name("date-time")
        assert (schema.type, schema.format) == ("string", "date-time")

    def test_unknown_name_is_used_as_type(self):
        assert common_name("object") == "object"
        assert schema_from_common_name("object").type == "object"
