"""Definition registry: canonical schema definitions keyed by type identity."""

import logging
from collections.abc import Callable, Hashable
from typing import Any

from swagger_gen.reflect.types import is_optional, strip_optional
from swagger_gen.schema.base import REF_DEFINITION_PREFIX, SchemaObj

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """Session-scoped store of named definitions.

    Three structures are kept in step: the canonical definitions by type,
    the set of names handed out so far and the queue of types waiting for
    their fields to be expanded. Not thread-safe; one generation session
    runs in one call chain.
    """

    def __init__(self):
        self._definitions: dict[Hashable, SchemaObj] = {}
        self._names: set[str] = set()
        self._queue: dict[Hashable, None] = {}

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, identity: Hashable) -> bool:
        return identity in self._definitions

    def lookup(self, identity: Hashable) -> SchemaObj | None:
        """Exact match first; ``Optional[T]`` falls back to ``T``."""
        definition = self._definitions.get(identity)
        if definition is None and is_optional(identity):
            definition = self._definitions.get(strip_optional(identity))
        return definition

    def add(self, identity: Hashable, definition: SchemaObj) -> None:
        """Register a definition, renaming it if another type already took its name.

        Anonymous definitions and already registered identities are ignored.
        """
        if not definition.type_name:
            return
        if identity in self._definitions:
            return

        if definition.type_name in self._names:
            base_name = definition.type_name
            index = 2
            while f"{base_name}Type{index}" in self._names:
                index += 1
            definition.type_name = f"{base_name}Type{index}"
            if definition.ref:
                definition.ref = REF_DEFINITION_PREFIX + definition.type_name
            logger.debug("Definition name %s is taken, registering %r as %s", base_name, identity, definition.type_name)

        self._names.add(definition.type_name)
        self._definitions[identity] = definition
        logger.debug("Registered definition %s", definition.type_name)

    def remove(self, identity: Hashable) -> None:
        """Drop a definition and its queue entry.

        The name stays reserved: references handed out earlier still point
        at it, so no later type may take it over.
        """
        definition = self._definitions.pop(identity, None)
        self._queue.pop(identity, None)
        if definition is not None:
            logger.debug("Removed definition %s", definition.type_name)

    def enqueue(self, identity: Hashable) -> None:
        if identity not in self._queue:
            logger.debug("Queued %r for expansion", identity)
        self._queue[identity] = None

    def is_queued(self, identity: Hashable) -> bool:
        return identity in self._queue

    def drain(self, expand: Callable[[Any], None]) -> list[Exception]:
        """Expand queued types until the queue is empty.

        ``expand`` may enqueue further types; they are picked up by the
        same loop. Each queued type is removed before it is expanded, so it
        is expanded exactly once. A failing expansion does not stop the
        others; the errors are returned in the order they occurred.
        """
        errors: list[Exception] = []
        while self._queue:
            identity = next(iter(self._queue))
            del self._queue[identity]
            try:
                expand(identity)
            except Exception as exc:
                logger.debug("Expansion of %r failed: %s", identity, exc)
                errors.append(exc)
        return errors

    def reset(self) -> None:
        self._definitions = {}
        self._names = set()
        self._queue = {}

    def definitions(self) -> dict[str, SchemaObj]:
        """Canonical definitions keyed by their final, unique names."""
        return {definition.type_name: definition for definition in self._definitions.values()}
