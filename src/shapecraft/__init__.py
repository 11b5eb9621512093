"""
Declarative conversion of object graphs to JSON-shaped documents.
"""

from .collection import CollectionSerializer
from .context import SerializationContext, SideloadCollector
from .descriptor import (
    AssociationSpec,
    AttributeSpec,
    Descriptor,
    RootPolicy,
    SerializerConfig,
    attribute,
    has_many,
    has_one,
    merge_descriptor,
)
from .exceptions import (
    CircularReferenceError,
    ConfigurationError,
    IncludeWithoutSideloadRootError,
    SerializerError,
    UnresolvableSerializerError,
)
from .hooks import on_load, run_load_hooks
from .registry import SerializerRegistry, SerializerSupport, get_registry
from .serializer import Serializer
from .serializing import serialize
from .settings import Settings, configure, get_settings, load_settings

__all__ = [
    "Serializer",
    "SerializerConfig",
    "CollectionSerializer",
    "SerializationContext",
    "SideloadCollector",
    "Descriptor",
    "AttributeSpec",
    "AssociationSpec",
    "RootPolicy",
    "attribute",
    "has_one",
    "has_many",
    "merge_descriptor",
    "serialize",
    "SerializerRegistry",
    "SerializerSupport",
    "get_registry",
    "on_load",
    "run_load_hooks",
    "Settings",
    "configure",
    "get_settings",
    "load_settings",
    "SerializerError",
    "ConfigurationError",
    "IncludeWithoutSideloadRootError",
    "UnresolvableSerializerError",
    "CircularReferenceError",
]

run_load_hooks(Serializer)
