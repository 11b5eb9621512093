"""
Serialization entry point.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from .collection import CollectionSerializer
from .exceptions import UnresolvableSerializerError
from .registry import get_registry
from .serializer import Serializer
from .typedefs import COLLECTION_TYPES, DocumentType, SelfDescribingSerializable

__all__ = [
    "serialize",
]


def serialize(
    obj: Any,
    serializer: type[Serializer] | None = None,
    /,
    *,
    scope: Any = None,
    root: str | Literal[False] | None = None,
    each_serializer: type[Serializer] | None = None,
    **options: Any,
) -> DocumentType:
    """
    Serialize an object or a collection of objects to a document.

    Collections (lists, tuples, sets and generators) are serialized element-wise,
    wrapped under `root` if given. Other objects are serialized with `serializer` if
    given, else the serializer the object declares, else the one conventionally named
    after its type, e.g. `PostSerializer` for `Post`.

    :param obj: Object or collection to serialize
    :param serializer: Serializer for a single object
    :param scope: Opaque value passed to serializers, e.g. the current user
    :param root: Root key overriding configuration, or `False` for none
    :param each_serializer: Serializer for every element of a collection
    :param options: Additional options reachable by every serializer
    :raises SerializerError: If the object graph can't be serialized
    """
    if root is not None:
        options["root"] = root

    if isinstance(obj, COLLECTION_TYPES) and not isinstance(obj, Mapping):
        if serializer is not None:
            raise ValueError(
                "Pass each_serializer rather than serializer for collections"
            )
        if each_serializer is not None:
            options["each_serializer"] = each_serializer
        return CollectionSerializer(obj, scope=scope, **options).to_document()

    if each_serializer is not None:
        raise ValueError("each_serializer only applies to collections")

    serializer_cls = serializer or _find_serializer(obj)
    return serializer_cls(obj, scope=scope, **options).to_document()


def _find_serializer(obj: Any) -> type[Serializer]:
    if isinstance(obj, SelfDescribingSerializable):
        return obj.serializer_class()
    if serializer := get_registry().find(type(obj)):
        return serializer
    raise UnresolvableSerializerError(
        f"No serializer found for {type(obj).__name__} object {obj!r}"
    )
