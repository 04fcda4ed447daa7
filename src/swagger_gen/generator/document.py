"""Document generator: header, security definitions, paths and definitions."""

import logging
import re
from typing import Any

from swagger_gen.config import GeneratorConfig
from swagger_gen.errors import ConfigurationError
from swagger_gen.generator.render import render_json, render_yaml
from swagger_gen.reflect.parameters import ParameterExtractor
from swagger_gen.reflect.registry import DefinitionRegistry
from swagger_gen.reflect.synthesizer import SchemaSynthesizer, type_and_value
from swagger_gen.reflect.types import python_type_name, strip_optional, struct_fields
from swagger_gen.schema.base import ParamObj, SchemaObj
from swagger_gen.schema.document import (
    HTTP_METHODS,
    ContactObj,
    Document,
    InfoObj,
    LicenseObj,
    OperationObj,
    PathItem,
    PathItemInfo,
    ResponseObj,
    SecurityDef,
)

logger = logging.getLogger(__name__)

DEFAULT_SCHEMES = ["http", "https"]
SUCCESS_DESCRIPTION = "request success"

# {id:[0-9]+} -> {id}
_PATH_PARAMETER = re.compile(r"\{([^}:]+)(:[^/]+)?\}")


class Generator:
    """Collects operations and definitions into one Swagger 2.0 document.

    A generator holds mutable session state (the definition registry and the
    paths table); calls on one instance must not run concurrently.
    """

    def __init__(self, reflect_types: bool = False):
        self.reflect_types = reflect_types
        self.registry = DefinitionRegistry()
        self.type_map: dict[Any, Any] = {}
        self.synthesizer = SchemaSynthesizer(self.registry, self.type_map, reflect_types)
        self.extractor = ParameterExtractor(self.synthesizer, reflect_types)
        self._info = InfoObj()
        self._host: str | None = None
        self._base_path: str | None = None
        self._schemes = list(DEFAULT_SCHEMES)
        self._security_definitions: dict[str, SecurityDef] = {}
        self._extensions: dict[str, Any] = {}
        self._paths: dict[str, PathItem] = {}

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "Generator":
        gen = cls(reflect_types=config.reflect_types)
        gen._info = config.info.model_copy(deep=True)
        gen._host = config.host
        gen._base_path = config.base_path
        if config.schemes:
            gen._schemes = list(config.schemes)
        for name, definition in config.security_definitions.items():
            gen.add_security_definition(name, definition)
        for name, value in config.extensions.items():
            gen.add_extended_field(name, value)
        return gen

    # Document header

    def set_host(self, host: str) -> "Generator":
        self._host = host
        return self

    def set_base_path(self, base_path: str) -> "Generator":
        self._base_path = base_path
        return self

    def set_schemes(self, schemes: list[str]) -> "Generator":
        self._schemes = list(schemes)
        return self

    def set_info(self, title: str, description: str = "", terms_of_service: str = "", version: str = "") -> "Generator":
        self._info.title = title
        self._info.description = description or None
        self._info.terms_of_service = terms_of_service or None
        self._info.version = version
        return self

    def set_contact(self, name: str, url: str = "", email: str = "") -> "Generator":
        self._info.contact = ContactObj(name=name, url=url or None, email=email or None)
        return self

    def set_license(self, name: str, url: str = "") -> "Generator":
        self._info.license = LicenseObj(name=name, url=url or None)
        return self

    def add_security_definition(self, name: str, definition: SecurityDef) -> "Generator":
        self._security_definitions[name] = definition
        return self

    def add_extended_field(self, name: str, value: Any) -> "Generator":
        self._extensions[name] = value
        return self

    def add_type_map(self, src: Any, dst: Any) -> "Generator":
        """Document ``src`` as if it were ``dst`` (a type or an instance of one)."""
        dst_type, _ = type_and_value(dst)
        self.type_map[strip_optional(src)] = dst_type
        return self

    # Reflection entry points

    def parse_definition(self, obj: Any) -> SchemaObj:
        return self.synthesizer.parse_definition(obj)

    def parse_parameter(self, obj: Any) -> tuple[str, list[ParamObj]]:
        return self.extractor.extract(obj)

    def reset_definitions(self) -> None:
        self.registry.reset()
        struct_fields.cache_clear()

    def reset_paths(self) -> None:
        self._paths = {}

    # Paths

    def set_path_item(self, info: PathItemInfo, params: Any = None, body: Any = None, response: Any = None) -> None:
        """Register one operation.

        The path table is only written once every part of the operation has
        been built, so a failure leaves previously registered operations as
        they were.
        """
        if info.method.upper() not in HTTP_METHODS:
            raise ConfigurationError(f"unsupported HTTP method: {info.method}")
        path = _normalize_path(info.path)
        item = self._paths.get(path)
        if item is not None and item.has_method(info.method):
            logger.debug("%s %s is already registered", info.method.upper(), path)
            return

        operation = OperationObj(
            summary=info.title or None,
            description=info.description or None,
            deprecated=info.deprecated or None,
            tags=[info.tag] if info.tag else None,
        )
        operation.extensions.update(info.extensions)
        operation.security = self._security(info)

        if params is not None:
            if self.reflect_types:
                operation.add_extended_field("x-request-python-type", python_type_name(type_and_value(params)[0]))
            _, operation.parameters = self.parse_parameter(params)

        operation.responses = {"200": self._response(response)}

        if body is not None:
            if self.reflect_types:
                operation.add_extended_field("x-request-python-type", python_type_name(type_and_value(body)[0]))
            schema = self.parse_definition(body)
            if schema.is_empty():
                self.registry.remove(type_and_value(body)[0])
            else:
                body_param = ParamObj(name="body", in_="body", required=True, schema_=schema)
                operation.parameters = (operation.parameters or []) + [body_param]

        if item is None:
            item = PathItem()
        item.set_operation(info.method, operation)
        self._paths[path] = item
        logger.debug("Registered %s %s", info.method.upper(), path)

    def _security(self, info: PathItemInfo) -> list[dict[str, list[str]]] | None:
        requirements = [(name, []) for name in info.security]
        requirements += list(info.security_oauth2.items())
        for name, _ in requirements:
            if name not in self._security_definitions:
                raise ConfigurationError(f"undefined security definition: {name}")
        return [{name: list(scopes)} for name, scopes in requirements] or None

    def _response(self, response: Any) -> ResponseObj:
        if response is None:
            return ResponseObj(description=SUCCESS_DESCRIPTION, schema_=SchemaObj(type="null"))
        return ResponseObj(description=SUCCESS_DESCRIPTION, schema_=self.parse_definition(response))

    # Output

    def document(self) -> Document:
        doc = Document(
            info=self._info.model_copy(deep=True),
            host=self._host,
            base_path=self._base_path,
            schemes=list(self._schemes) or None,
            paths=dict(self._paths),
            definitions=self.registry.definitions() or None,
            security_definitions=dict(self._security_definitions) or None,
        )
        doc.extensions.update(self._extensions)
        return doc

    def gen_document(self, indent: int | None = None) -> str:
        """Render the document as JSON."""
        return render_json(self.document(), indent=indent)

    def gen_document_yaml(self) -> str:
        return render_yaml(self.document())


def _normalize_path(path: str) -> str:
    """Strip router-style regexps from path parameters."""
    return _PATH_PARAMETER.sub(lambda m: "{" + m.group(1) + "}", path)


default_generator = Generator()


def parse_definition(obj: Any) -> SchemaObj:
    return default_generator.parse_definition(obj)


def parse_parameter(obj: Any) -> tuple[str, list[ParamObj]]:
    return default_generator.parse_parameter(obj)


def set_path_item(info: PathItemInfo, params: Any = None, body: Any = None, response: Any = None) -> None:
    default_generator.set_path_item(info, params, body, response)


def reset_definitions() -> None:
    default_generator.reset_definitions()


def reset_paths() -> None:
    default_generator.reset_paths()


def gen_document(indent: int | None = None) -> str:
    return default_generator.gen_document(indent=indent)
