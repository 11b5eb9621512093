"""
Basic definitions for documents and the capabilities of source objects.
"""

from __future__ import annotations

from collections.abc import Generator, Mapping
from types import NoneType
from typing import (
    TYPE_CHECKING,
    Any,
    Literal,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from .serializer import Serializer

__all__ = [
    "DocumentType",
    "EmbedModeType",
    "CardinalityType",
    "SupportsReadAttribute",
    "SelfDescribingSerializable",
    "SupportsDocument",
    "SupportsSchemaReflection",
    "COLLECTION_TYPES",
    "SCALAR_TYPES",
]

type DocumentType = str | int | float | bool | NoneType | list[DocumentType] | dict[
    str, DocumentType
]
"""
Native types which can be represented in JSON format.
"""

type EmbedModeType = Literal["ids", "objects"]
"""
How associated objects are rendered:

- `"ids"`: Identifier only
- `"objects"`: Fully serialized nested document
"""

type CardinalityType = Literal["one", "many"]
"""
Whether an association refers to a single object or a collection.
"""

COLLECTION_TYPES = (list, tuple, set, frozenset, Generator)
"""
Types serialized element-wise as collections.
"""

SCALAR_TYPES = (str, int, float, bool, NoneType)
"""
Types passed through to documents unchanged.
"""


@runtime_checkable
class SupportsReadAttribute(Protocol):
    """
    Object exposing a generic attribute read used when a serializer doesn't override
    the attribute.
    """

    def read_attribute(self, name: str, /) -> Any: ...


@runtime_checkable
class SelfDescribingSerializable(Protocol):
    """
    Object declaring the serializer to use for it.
    """

    def serializer_class(self) -> type[Serializer]: ...


@runtime_checkable
class SupportsDocument(Protocol):
    """
    Object providing its own generic document representation, used for collection
    elements without a serializer.
    """

    def as_document(self) -> DocumentType: ...


@runtime_checkable
class SupportsSchemaReflection(Protocol):
    """
    Model class exposing column types and association reflection.
    """

    def columns_hash(self) -> Mapping[str, Any]: ...

    def reflect_on_association(self, name: str, /) -> Any: ...
