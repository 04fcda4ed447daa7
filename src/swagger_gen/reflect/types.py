"""Type descriptors: the introspection layer under the schema synthesizer.

Everything that inspects a Python type lives here, so the synthesizer and
the parameter extractor only deal with descriptors and predicates.
"""

import asyncio
import collections
import collections.abc as cabc
import dataclasses
import decimal
import functools
import inspect
import ipaddress
import pathlib
import queue
import re
import types
import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Protocol, Union, get_args, get_origin, get_type_hints

from swagger_gen.errors import UnsupportedTypeError
from swagger_gen.reflect.kinds import Kind, is_class
from swagger_gen.schema.base import ParamObj, SchemaObj

MISSING = dataclasses.MISSING

_NON_WORD = re.compile(r"\W+")

# Opaque types that parse themselves from text; documented as plain strings.
TEXT_TYPES = (
    uuid.UUID,
    decimal.Decimal,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
    pathlib.PurePath,
)

SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
    cabc.Sequence,
    cabc.MutableSequence,
    cabc.Set,
    cabc.MutableSet,
    cabc.Collection,
)

MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    cabc.Mapping,
    cabc.MutableMapping,
)

# Functions, channels and lazy producers have no schema representation.
UNSUPPORTED_ORIGINS = (
    cabc.Callable,
    cabc.Iterator,
    cabc.Generator,
    cabc.AsyncIterator,
    cabc.AsyncGenerator,
    cabc.Coroutine,
    cabc.Awaitable,
)

UNSUPPORTED_CLASSES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    queue.Queue,
    asyncio.Queue,
)


class DefinitionProvider(Protocol):
    """A type that describes its own schema; reflection is bypassed."""

    @classmethod
    def swagger_definition(cls) -> tuple[str, SchemaObj]: ...


class ParameterProvider(Protocol):
    """A parameter struct that describes its own parameter list."""

    @classmethod
    def swagger_parameters(cls) -> tuple[str, list[ParamObj]]: ...


class Enumer(Protocol):
    """A field type that enumerates its legal values and their display names."""

    @classmethod
    def enum_slices(cls) -> tuple[list[Any], list[str]]: ...


class TextUnmarshaler(Protocol):
    @classmethod
    def unmarshal_text(cls, text: str) -> Any: ...


def capability(obj: Any, name: str):
    """Return the bound hook ``name`` of a type or instance, or None."""
    hook = getattr(obj, name, None)
    return hook if callable(hook) else None


def call_hook(tp: Any, value: Any, name: str) -> Any:
    """Call hook ``name`` on ``value`` when it is an instance of ``tp``, else on ``tp`` itself.

    Hooks written as plain methods need an instance; calling one on the bare
    type raises ``UnsupportedTypeError``.
    """
    if value is not None and is_class(tp) and isinstance(value, tp):
        return getattr(value, name)()
    hook = getattr(tp, name)
    try:
        inspect.signature(hook).bind()
    except TypeError as exc:
        raise UnsupportedTypeError(
            f"{python_type_name(tp)}.{name} needs an instance: pass one, or make it a classmethod"
        ) from exc
    return hook()


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """Reflected metadata of one dataclass field."""

    name: str
    type: Any
    tags: types.MappingProxyType
    default: Any = MISSING
    default_factory: Any = MISSING
    embedded: bool = False

    @property
    def exported(self) -> bool:
        return not self.name.startswith("_")

    def tag(self, key: str) -> str:
        """Return a tag value, '' when absent."""
        value = self.tags.get(key, "")
        return "" if value is None else str(value)

    def default_value(self) -> Any:
        """The field default; factory defaults are built fresh on every call."""
        if self.default_factory is not MISSING:
            return self.default_factory()
        return self.default


def tags(
    json: str | None = None,
    swgen_type: str | None = None,
    default: Any = None,
    description: str | None = None,
    query: str | None = None,
    form: str | None = None,
    schema: str | None = None,
    path: str | None = None,
    in_: str | None = None,
    binding: str | None = None,
    embed: bool = False,
    **extra: Any,
) -> dict[str, Any]:
    """Build ``dataclasses.field`` metadata from keyword tags.

    >>> field(metadata=tags(json="id", default="1"))
    """
    values = {
        "json": json,
        "swgen_type": swgen_type,
        "default": default,
        "description": description,
        "query": query,
        "form": form,
        "schema": schema,
        "path": path,
        "in": in_,
        "binding": binding,
        **extra,
    }
    metadata = {key: value for key, value in values.items() if value is not None}
    if embed:
        metadata["embed"] = True
    return metadata


def is_optional(tp: Any) -> bool:
    origin = get_origin(tp)
    return (origin is Union or origin is types.UnionType) and type(None) in get_args(tp)


def strip_optional(tp: Any) -> Any:
    """Remove ``Optional`` wrapping, repeatedly; ``T | None`` is documented as ``T``."""
    while is_optional(tp):
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) != 1:
            raise UnsupportedTypeError(f"union types are not supported: {tp!r}")
        tp = members[0]
    return tp


def strip_annotated(tp: Any) -> Any:
    """Drop ``Annotated`` wrappers that carry no scalar kind."""
    while get_origin(tp) is Annotated and not any(isinstance(m, Kind) for m in tp.__metadata__):
        tp = get_args(tp)[0]
    return tp


def is_any(tp: Any) -> bool:
    return tp is Any or tp is object


def is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def is_literal(tp: Any) -> bool:
    return get_origin(tp) is Literal


def is_enum(tp: Any) -> bool:
    return is_class(tp) and issubclass(tp, Enum)


def is_struct(tp: Any) -> bool:
    """True for dataclasses and parameterized generic dataclasses."""
    origin = get_origin(tp)
    if origin is not None:
        return isinstance(origin, type) and dataclasses.is_dataclass(origin)
    return is_class(tp) and dataclasses.is_dataclass(tp)


def is_text_type(tp: Any) -> bool:
    if not is_class(tp):
        return False
    return issubclass(tp, TEXT_TYPES) or capability(tp, "unmarshal_text") is not None


def is_interface(tp: Any) -> bool:
    """True for protocols and abstract classes: types known only by their methods."""
    if not is_class(tp):
        return False
    return bool(getattr(tp, "_is_protocol", False)) or inspect.isabstract(tp)


def is_unsupported(tp: Any) -> bool:
    origin = get_origin(tp)
    if origin is not None:
        return origin in UNSUPPORTED_ORIGINS
    if tp in UNSUPPORTED_ORIGINS:
        return True
    return is_class(tp) and issubclass(tp, UNSUPPORTED_CLASSES)


def _container(tp: Any) -> tuple[Any, tuple]:
    """Return ``(origin, args)`` for a container type, following named container subclasses."""
    origin = get_origin(tp)
    if origin is not None:
        return origin, get_args(tp)
    if not is_class(tp):
        return None, ()
    for base in getattr(tp, "__orig_bases__", ()):
        base_origin = get_origin(base)
        if isinstance(base_origin, type) and issubclass(base_origin, SEQUENCE_ORIGINS + MAPPING_ORIGINS):
            return base_origin, get_args(base)
    return tp, ()


def sequence_item(tp: Any) -> Any:
    """Return the item type of a sequence type, or MISSING when ``tp`` is not a sequence."""
    origin, args = _container(tp)
    if not isinstance(origin, type) or not issubclass(origin, SEQUENCE_ORIGINS):
        return MISSING
    if issubclass(origin, MAPPING_ORIGINS + (str, bytes, bytearray)):
        return MISSING
    if not args:
        return Any
    if issubclass(origin, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if len(set(args)) != 1:
            raise UnsupportedTypeError(f"heterogeneous tuples are not supported: {tp!r}")
    return args[0]


def mapping_value(tp: Any) -> Any:
    """Return the value type of a mapping type, or MISSING when ``tp`` is not a mapping."""
    origin, args = _container(tp)
    if not isinstance(origin, type) or not issubclass(origin, MAPPING_ORIGINS):
        return MISSING
    if len(args) != 2:
        return Any
    return args[1]


def is_named_container(tp: Any) -> bool:
    """True for classes such as ``class Pets(list[Pet])``."""
    return (
        is_class(tp)
        and issubclass(tp, (list, tuple, set, frozenset, dict))
        and tp not in (list, tuple, set, frozenset, dict)
    )


def container_base(tp: type) -> Any:
    """Return the parameterized container a named container derives from."""
    for base in getattr(tp, "__orig_bases__", ()):
        if get_origin(base) is not None:
            return base
    for base in tp.__mro__[1:]:
        if base in (list, tuple, set, frozenset, dict):
            return base
    return Any


def reliable_name(tp: Any) -> str:
    """Stable definition name for a type; generic aliases join their arguments (``PagePet``)."""
    tp = strip_annotated(tp)
    origin = get_origin(tp)
    if origin is not None and not is_union(tp):
        args = [arg for arg in get_args(tp) if arg is not Ellipsis]
        parts = [reliable_name(origin)] + [_capitalize(reliable_name(arg)) for arg in args]
        return "".join(parts)
    if is_optional(tp):
        return reliable_name(strip_optional(tp))
    name = getattr(tp, "__name__", None) or repr(tp)
    return _NON_WORD.sub("", name)


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def python_type_name(tp: Any) -> str:
    if is_class(tp):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


def _substitute(hint: Any, mapping: dict) -> Any:
    if not mapping:
        return hint
    if hint in mapping:
        return mapping[hint]
    parameters = getattr(hint, "__parameters__", ())
    if parameters:
        return hint[tuple(mapping.get(p, p) for p in parameters)]
    return hint


@functools.lru_cache(maxsize=256)
def struct_fields(tp: Any) -> tuple[FieldDescriptor, ...]:
    """Reflect the fields of a dataclass (or parameterized generic dataclass) once."""
    origin = get_origin(tp) or tp
    try:
        hints = get_type_hints(origin, include_extras=True)
    except NameError as exc:
        raise UnsupportedTypeError(f"cannot resolve annotations of {python_type_name(origin)}: {exc}") from exc

    mapping = {}
    if origin is not tp:
        mapping = dict(zip(getattr(origin, "__parameters__", ()), get_args(tp)))

    descriptors = []
    for field in dataclasses.fields(origin):
        descriptors.append(
            FieldDescriptor(
                name=field.name,
                type=_substitute(hints.get(field.name, field.type), mapping),
                tags=types.MappingProxyType(dict(field.metadata)),
                default=field.default,
                default_factory=field.default_factory,
                embedded=bool(field.metadata.get("embed")),
            )
        )
    return tuple(descriptors)
