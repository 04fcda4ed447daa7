"""Exceptions raised while generating a document."""


class SwaggerGenError(Exception):
    """Base class for all swagger-gen errors."""


class UnsupportedTypeError(SwaggerGenError, TypeError):
    """A type has no schema representation, or cannot be used as a parameter."""


class ConfigurationError(SwaggerGenError, ValueError):
    """Invalid generator configuration, e.g. an undeclared security scheme."""
