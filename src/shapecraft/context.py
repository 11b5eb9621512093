"""
Per-call state shared by every serializer within one top-level serialization.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator, Hashable, Iterator, Mapping

from .exceptions import CircularReferenceError, ConfigurationError
from .typedefs import DocumentType

__all__ = [
    "SideloadCollector",
    "SerializationContext",
]

logger = logging.getLogger(__name__)


class _Pending:
    """
    Placeholder for a claimed entity whose document is still being built.
    """

    def __repr__(self) -> str:
        return "<pending>"


_PENDING = _Pending()


class SideloadCollector:
    """
    Accumulates entities to be placed at the top level of a document, grouped by
    bucket key and deduplicated by identifier.

    The first registration of an identifier wins; later ones are ignored. Order within
    a bucket follows first registration.
    """

    __buckets: dict[str, dict[Hashable, Any]]
    """
    Mapping of bucket key to identifier to document (or pending placeholder).
    """

    __anonymous: dict[str, list[DocumentType]]
    """
    Documents of entities without identifier, deduplicated by equality.
    """

    __drained: bool

    def __init__(self):
        self.__buckets = {}
        self.__anonymous = {}
        self.__drained = False

    def __repr__(self) -> str:
        return "SideloadCollector(buckets={})".format(
            {k: len(v) for k, v in self.__buckets.items()}
        )

    def __contains__(self, item: tuple[str, Hashable]) -> bool:
        bucket, identifier = item
        return identifier in self.__buckets.get(bucket, {})

    def ensure(self, bucket: str):
        """
        Create bucket if it doesn't exist, so it's present in the output even if empty.
        """
        self.__buckets.setdefault(bucket, {})

    def claim(self, bucket: str, identifier: Hashable) -> bool:
        """
        Reserve the slot of an entity before building its document, returning `False`
        if it was already claimed or registered.

        Reserving first keeps first-seen order and stops recursion through entities
        referring back to each other.
        """
        entities = self.__buckets.setdefault(bucket, {})
        if identifier is None or identifier in entities:
            return False
        entities[identifier] = _PENDING
        return True

    def register(self, bucket: str, identifier: Hashable, document: DocumentType):
        """
        Register an entity's document. A repeat registration of the same identifier is
        a no-op.
        """
        if identifier is None:
            docs = self.__anonymous.setdefault(bucket, [])
            self.__buckets.setdefault(bucket, {})
            if document not in docs:
                docs.append(document)
            return

        entities = self.__buckets.setdefault(bucket, {})
        if entities.get(identifier, _PENDING) is _PENDING:
            logger.debug("Side-loading %s[%r]", bucket, identifier)
            entities[identifier] = document

    def drain(self) -> dict[str, list[DocumentType]]:
        """
        Get the collected documents per bucket. Can only be called once.
        """
        assert not self.__drained, "Side-loaded entities already drained"
        self.__drained = True

        drained: dict[str, list[DocumentType]] = {}
        for bucket, entities in self.__buckets.items():
            assert not any(
                d is _PENDING for d in entities.values()
            ), f"Pending entities in bucket '{bucket}'"
            drained[bucket] = [*entities.values(), *self.__anonymous.get(bucket, [])]
        return drained

    def merge_into(self, document: dict[str, Any], root_key: str):
        """
        Drain collected documents and place each bucket beside the root key.
        """
        for bucket, entities in self.drain().items():
            if bucket == root_key:
                raise ConfigurationError(
                    f"Side-load bucket '{bucket}' collides with the root key"
                )
            logger.debug(
                "Merging %d side-loaded entities under '%s'", len(entities), bucket
            )
            document[bucket] = entities


class SerializationContext:
    """
    State of one top-level serialization, passed by reference to every nested
    serializer.
    """

    scope: Any
    """
    Opaque value passed to conditional inclusion hooks and nested serializers, e.g.
    the current user.
    """

    options: Mapping[str, Any]
    """
    Options passed at the entry point. Recognized keys are `root`, `each_serializer`
    and `hash`; other keys pass through to nested serializers.
    """

    collector: SideloadCollector | None
    """
    Collector of side-loaded entities, only present when the top-level document has
    a root.
    """

    document: dict[str, Any] | None
    """
    Top-level document under construction, only present when it has a root.
    """

    __path: list[str | int]
    """
    Field path at the current level in recursion.
    """

    __seen: set[int]
    """
    Ids of objects currently being serialized, for cycle detection.
    """

    def __init__(
        self,
        *,
        scope: Any = None,
        options: Mapping[str, Any] | None = None,
        collector: SideloadCollector | None = None,
        document: dict[str, Any] | None = None,
    ):
        self.scope = scope
        self.options = dict(options or {})
        self.collector = collector
        self.document = document
        self.__path = []
        self.__seen = set()

    def __repr__(self) -> str:
        return "{}(scope={!r}, options={!r}, path={})".format(
            type(self).__name__, self.scope, self.options, self.path
        )

    @property
    def path(self) -> tuple[str | int, ...]:
        """
        The current path in the object graph.
        """
        return tuple(self.__path)

    @contextmanager
    def establish_root(self) -> Iterator[dict[str, Any]]:
        """
        Attach a fresh collector and top-level document for the duration of a
        root-wrapped serialization.
        """
        self.collector = SideloadCollector()
        self.document = {}
        try:
            yield self.document
        finally:
            self.collector = None

    @contextmanager
    def enter(self, *segments: str | int) -> Generator[None, None, None]:
        """
        Extend the path while serializing a nested field.
        """
        self.__path.extend(segments)
        try:
            yield
        finally:
            del self.__path[len(self.__path) - len(segments) :]

    @contextmanager
    def visit(self, obj: Any) -> Generator[None, None, None]:
        """
        Mark object as being serialized, raising if it's already on the recursion
        stack.
        """
        if id(obj) in self.__seen:
            raise CircularReferenceError(
                f"Already serializing object '{obj!r}', can't recurse", path=self.path
            )
        self.__seen.add(id(obj))
        try:
            yield
        finally:
            self.__seen.remove(id(obj))
