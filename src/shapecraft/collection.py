"""
Serialization of collections of possibly heterogeneous objects.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Literal

from .context import SerializationContext
from .exceptions import UnresolvableSerializerError
from .serializer import Serializer
from .typedefs import (
    SCALAR_TYPES,
    DocumentType,
    SelfDescribingSerializable,
    SupportsDocument,
)

__all__ = [
    "CollectionSerializer",
]


class CollectionSerializer:
    """
    Serializes each element of a collection with its own serializer, sharing one
    context so side-loaded entities are deduplicated across elements.

    Element serializer, in order:

    1. `each_serializer` option
    2. The element's own declared serializer
    3. The element's own document representation via `as_document()`; mappings and
       JSON scalars are passed through
    """

    __items: Iterable[Any]
    __context: SerializationContext

    def __init__(
        self,
        items: Iterable[Any],
        /,
        *,
        scope: Any = None,
        context: SerializationContext | None = None,
        **options: Any,
    ):
        if context is not None and (scope is not None or options):
            raise ValueError("Can't pass scope or options along with a context")
        self.__items = items
        self.__context = context or SerializationContext(scope=scope, options=options)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.__items!r})"

    @property
    def context(self) -> SerializationContext:
        return self.__context

    @property
    def options(self) -> Mapping[str, Any]:
        return self.__context.options

    def serialize(self) -> list[DocumentType]:
        """
        Get the list of element fragments, without root.
        """
        results: list[DocumentType] = []
        for i, item in enumerate(self.__items):
            with self.__context.enter(i), self.__context.visit(item):
                results.append(self.serialize_item(item))
        return results

    def serialize_item(self, item: Any) -> DocumentType:
        """
        Serialize a single element.
        """
        if serializer_cls := self.find_item_serializer(item):
            return serializer_cls(item, context=self.__context).serialize()

        if isinstance(item, SupportsDocument):
            return item.as_document()
        if isinstance(item, Mapping):
            return dict(item)
        if isinstance(item, SCALAR_TYPES):
            return item

        raise UnresolvableSerializerError(
            f"No serializer found for {type(item).__name__} object {item!r}",
            path=self.__context.path,
        )

    def find_item_serializer(self, item: Any) -> type[Serializer] | None:
        each_serializer = self.options.get("each_serializer")
        if each_serializer is not None:
            return each_serializer
        if isinstance(item, SelfDescribingSerializable):
            return item.serializer_class()
        return None

    def to_document(
        self, *, root: str | Literal[False] | None = None
    ) -> DocumentType:
        """
        Get the complete document: a bare list of element fragments, or, if a root is
        given here or as an option, the list under the root key with side-loaded
        entities beside it.
        """
        root_key = root if root is not None else self.options.get("root")
        if not root_key:
            return self.serialize()

        if self.__context.collector is not None:
            # side-loaded entities stay with the enclosing document
            return {str(root_key): self.serialize()}

        with self.__context.establish_root() as document:
            document[str(root_key)] = self.serialize()
            assert self.__context.collector is not None
            self.__context.collector.merge_into(document, str(root_key))
        return document
