"""Document-level Swagger 2.0 models: info block, security, paths and operations."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .base import Extensible, ParamObj, SchemaObj

HTTP_METHODS = ("GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH")


class SecurityType(str, Enum):
    BASIC_AUTH = "basic"
    API_KEY = "apiKey"
    OAUTH2 = "oauth2"


class ContactObj(BaseModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class LicenseObj(BaseModel):
    name: str | None = None
    url: str | None = None


class InfoObj(BaseModel):
    """The ``info`` block of the document."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: str | None = None
    terms_of_service: str | None = Field(None, alias="termsOfService")
    contact: ContactObj | None = None
    license: LicenseObj | None = None
    version: str = ""


class SecurityDef(BaseModel):
    """A security scheme declared under ``securityDefinitions``."""

    model_config = ConfigDict(populate_by_name=True)

    type: SecurityType
    description: str | None = None
    in_: str | None = Field(None, alias="in")  # apiKey: header or query
    name: str | None = None  # apiKey: header or query parameter name
    flow: str | None = None  # oauth2: implicit, password, application, accessCode
    authorization_url: str | None = Field(None, alias="authorizationUrl")
    token_url: str | None = Field(None, alias="tokenUrl")
    scopes: dict[str, str] | None = None


class ResponseObj(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    schema_: SchemaObj | None = Field(None, alias="schema")


class OperationObj(Extensible):
    """One HTTP operation stored under a path."""

    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    parameters: list[ParamObj] | None = None
    responses: dict[str, ResponseObj] = Field(default_factory=dict)
    security: list[dict[str, list[str]]] | None = None
    deprecated: bool | None = None


class PathItem(BaseModel):
    """All operations registered under one path."""

    get: OperationObj | None = None
    put: OperationObj | None = None
    post: OperationObj | None = None
    delete: OperationObj | None = None
    options: OperationObj | None = None
    head: OperationObj | None = None
    patch: OperationObj | None = None

    def has_method(self, method: str) -> bool:
        return getattr(self, method.lower(), None) is not None

    def set_operation(self, method: str, operation: OperationObj) -> None:
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"unsupported HTTP method: {method}")
        setattr(self, method.lower(), operation)


class PathItemInfo(Extensible):
    """Caller-supplied description of an operation; extensions are copied to the operation."""

    path: str
    method: str
    title: str = ""
    description: str = ""
    tag: str = ""
    deprecated: bool = False
    security: list[str] = Field(default_factory=list)
    security_oauth2: dict[str, list[str]] = Field(default_factory=dict)


class Document(Extensible):
    """The root Swagger 2.0 document."""

    swagger: str = "2.0"
    info: InfoObj = Field(default_factory=InfoObj)
    host: str | None = None
    base_path: str | None = Field(None, alias="basePath")
    schemes: list[str] | None = None
    paths: dict[str, PathItem] = Field(default_factory=dict)
    definitions: dict[str, SchemaObj] | None = None
    security_definitions: dict[str, SecurityDef] | None = Field(None, alias="securityDefinitions")
