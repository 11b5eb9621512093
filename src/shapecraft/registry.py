"""
Process-wide registry of declared serializers, used to infer a serializer from the
name of an object's type.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from .exceptions import UnresolvableSerializerError

if TYPE_CHECKING:
    from .serializer import Serializer

__all__ = [
    "SerializerRegistry",
    "conventional_name",
    "get_registry",
    "SerializerSupport",
]

SERIALIZER_SUFFIX = "Serializer"

logger = logging.getLogger(__name__)


def conventional_name(type_: type) -> str:
    """
    Get the conventional serializer name for a type, e.g. `Post -> "PostSerializer"`.
    """
    return f"{type_.__name__}{SERIALIZER_SUFFIX}"


class SerializerRegistry:
    """
    Registry of serializer classes by class name. A later class with the same name
    replaces an earlier one.
    """

    __serializers: dict[str, type[Serializer]]

    def __init__(self, *serializers: type[Serializer]):
        self.__serializers = {}
        for serializer in serializers:
            self.register(serializer)

    def __repr__(self) -> str:
        return f"SerializerRegistry(serializers={self.serializers})"

    def __contains__(self, name: str) -> bool:
        return name in self.__serializers

    @property
    def serializers(self) -> tuple[type[Serializer], ...]:
        """
        Get serializers currently registered.
        """
        return tuple(self.__serializers.values())

    def register(self, serializer: type[Serializer], /):
        """
        Register a serializer.
        """
        self.__serializers[serializer.__name__] = serializer

    def find(
        self, type_: type, /, *, owner: type[Serializer] | None = None
    ) -> type[Serializer] | None:
        """
        Find the serializer conventionally named after the type or any of its bases.

        The owning serializer's class namespace and defining module are searched
        before this registry, so serializers can refer to ones not globally unique.
        """
        for base in type_.__mro__:
            if base is object:
                break
            name = conventional_name(base)
            for namespace in _namespaces(owner):
                if (found := _lookup(namespace, name)) is not None:
                    logger.debug("Inferred %s for %s", found.__name__, type_.__name__)
                    return found
            if serializer := self.__serializers.get(name):
                logger.debug("Inferred %s for %s", serializer.__name__, type_.__name__)
                return serializer
        return None


def _namespaces(owner: type | None) -> tuple[Any, ...]:
    if owner is None:
        return ()
    module = sys.modules.get(owner.__module__)
    return (owner,) if module is None else (owner, module)


def _lookup(namespace: Any, name: str) -> type[Serializer] | None:
    from .serializer import Serializer

    found = getattr(namespace, name, None)
    if isinstance(found, type) and issubclass(found, Serializer):
        return found
    return None


class SerializerSupport:
    """
    Mixin for source objects declaring the serializer conventionally named after
    their type.
    """

    def serializer_class(self) -> type[Serializer]:
        if serializer := _registry.find(type(self)):
            return serializer
        raise UnresolvableSerializerError(
            f"No serializer named {conventional_name(type(self))} is defined"
        )


_registry = SerializerRegistry()


def get_registry() -> SerializerRegistry:
    """
    Get the registry to which serializer classes are added upon definition.
    """
    return _registry
