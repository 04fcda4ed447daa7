"""Scalar kinds and their mapping onto Swagger common data types.

Python has a single ``int`` and ``float``; sized kinds are declared with
``typing.Annotated`` metadata (see the ``Int64``-style aliases below).
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, get_args, get_origin

from swagger_gen.schema.base import SchemaObj


class Kind(Enum):
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    BYTES = "bytes"
    DATE_TIME = "date-time"
    DATE = "date"


INTEGER_KINDS = frozenset({Kind.INT, Kind.INT8, Kind.INT16, Kind.INT32, Kind.INT64})
UNSIGNED_KINDS = frozenset({Kind.UINT, Kind.UINT8, Kind.UINT16, Kind.UINT32, Kind.UINT64})
FLOAT_KINDS = frozenset({Kind.FLOAT32, Kind.FLOAT64})

Int8 = Annotated[int, Kind.INT8]
Int16 = Annotated[int, Kind.INT16]
Int32 = Annotated[int, Kind.INT32]
Int64 = Annotated[int, Kind.INT64]
Uint = Annotated[int, Kind.UINT]
Uint8 = Annotated[int, Kind.UINT8]
Uint16 = Annotated[int, Kind.UINT16]
Uint32 = Annotated[int, Kind.UINT32]
Uint64 = Annotated[int, Kind.UINT64]
Float32 = Annotated[float, Kind.FLOAT32]
Float64 = Annotated[float, Kind.FLOAT64]


class CommonName(str, Enum):
    """Swagger 2.0 common data type names."""

    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BYTE = "byte"
    BINARY = "binary"
    BOOLEAN = "boolean"
    DATE = "date"
    DATE_TIME = "date-time"
    PASSWORD = "password"


# common name -> (type, format)
_COMMON_NAME_SCHEMAS = {
    CommonName.INTEGER: ("integer", "int32"),
    CommonName.LONG: ("integer", "int64"),
    CommonName.FLOAT: ("number", "float"),
    CommonName.DOUBLE: ("number", "double"),
    CommonName.STRING: ("string", ""),
    CommonName.BYTE: ("string", "byte"),
    CommonName.BINARY: ("string", "binary"),
    CommonName.BOOLEAN: ("boolean", ""),
    CommonName.DATE: ("string", "date"),
    CommonName.DATE_TIME: ("string", "date-time"),
    CommonName.PASSWORD: ("string", "password"),
}

# Accepted spellings for the swgen_type field tag besides the common names.
_COMMON_NAME_ALIASES = {
    "int": CommonName.INTEGER,
    "int32": CommonName.INTEGER,
    "int64": CommonName.LONG,
    "number": CommonName.DOUBLE,
    "bool": CommonName.BOOLEAN,
    "str": CommonName.STRING,
    "bytes": CommonName.BYTE,
    "datetime": CommonName.DATE_TIME,
    "dateTime": CommonName.DATE_TIME,
}

_KIND_COMMON_NAMES = {
    Kind.BOOL: CommonName.BOOLEAN,
    Kind.INT: CommonName.INTEGER,
    Kind.INT8: CommonName.INTEGER,
    Kind.INT16: CommonName.INTEGER,
    Kind.INT32: CommonName.INTEGER,
    Kind.INT64: CommonName.LONG,
    Kind.UINT: CommonName.INTEGER,
    Kind.UINT8: CommonName.INTEGER,
    Kind.UINT16: CommonName.INTEGER,
    Kind.UINT32: CommonName.LONG,
    Kind.UINT64: CommonName.LONG,
    Kind.FLOAT32: CommonName.FLOAT,
    Kind.FLOAT64: CommonName.DOUBLE,
    Kind.STRING: CommonName.STRING,
    Kind.BYTES: CommonName.BYTE,
    Kind.DATE_TIME: CommonName.DATE_TIME,
    Kind.DATE: CommonName.DATE,
}

# Checked in order: bool before int, datetime before date.
_BUILTIN_KINDS = (
    (bool, Kind.BOOL),
    (int, Kind.INT),
    (float, Kind.FLOAT64),
    (str, Kind.STRING),
    ((bytes, bytearray, memoryview), Kind.BYTES),
    (datetime, Kind.DATE_TIME),
    (date, Kind.DATE),
)


def is_class(tp: Any) -> bool:
    """True for real classes; parameterized aliases such as ``list[int]`` are excluded."""
    return isinstance(tp, type) and get_origin(tp) is None


def kind_of(tp: Any) -> Kind | None:
    """Return the scalar kind of a type, or None when it is not a scalar."""
    if get_origin(tp) is Annotated:
        for meta in tp.__metadata__:
            if isinstance(meta, Kind):
                return meta
        return kind_of(get_args(tp)[0])
    if not is_class(tp):
        return None
    for base, kind in _BUILTIN_KINDS:
        if issubclass(tp, base):
            return kind
    return None


def map_primitive(kind: Kind) -> tuple[str, str]:
    """Map a scalar kind to its Swagger ``(type, format)`` pair."""
    return _COMMON_NAME_SCHEMAS[_KIND_COMMON_NAMES[kind]]


def common_name(value: str) -> CommonName | str:
    """Resolve a swgen_type tag value; unknown values are returned unchanged."""
    if value in _COMMON_NAME_ALIASES:
        return _COMMON_NAME_ALIASES[value]
    try:
        return CommonName(value)
    except ValueError:
        return value


def schema_from_common_name(name: CommonName | str) -> SchemaObj:
    """Build an inline schema for a common name.

    Names outside the vocabulary are used verbatim as the schema type,
    so a tag such as ``swgen_type="object"`` still produces something useful.
    """
    if not isinstance(name, CommonName):
        name = common_name(name)
    if not isinstance(name, CommonName):
        return SchemaObj(type=name)
    schema_type, schema_format = _COMMON_NAME_SCHEMAS[name]
    return SchemaObj(type=schema_type, format=schema_format or None)


def schema_from_kind(kind: Kind) -> SchemaObj:
    return schema_from_common_name(_KIND_COMMON_NAMES[kind])
