"""Serialization of a finished document to JSON or YAML."""

import yaml

from swagger_gen.schema.document import Document

FORMATS = ("json", "yaml")


def document_dict(document: Document) -> dict:
    """Plain JSON-compatible data, keyed by the Swagger field names."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def render_json(document: Document, indent: int | None = None) -> str:
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def render_yaml(document: Document) -> str:
    return yaml.safe_dump(document_dict(document), sort_keys=False, allow_unicode=True)


def render(document: Document, fmt: str = "json") -> str:
    if fmt == "json":
        return render_json(document, indent=2)
    if fmt == "yaml":
        return render_yaml(document)
    raise ValueError(f"unknown output format: {fmt}")
