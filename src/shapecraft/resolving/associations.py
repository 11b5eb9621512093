"""
Resolution of associations: locating associated objects, choosing their serializer
and rendering them per embed mode, side-loading where requested.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..descriptor import AssociationSpec
from ..exceptions import (
    ConfigurationError,
    IncludeWithoutSideloadRootError,
    UnresolvableSerializerError,
)
from ..inflection import pluralize, underscore
from ..registry import get_registry
from ..typedefs import EmbedModeType, SelfDescribingSerializable
from .attributes import MISSING, find_override, read_attribute

if TYPE_CHECKING:
    from ..serializer import Serializer

__all__ = [
    "AssociationResolver",
    "find_serializer",
    "type_tag",
    "read_identifier",
]

IDENTIFIER_NAME = "id"

logger = logging.getLogger(__name__)


def type_tag(obj: Any) -> str:
    """
    Get the tag of an object's concrete type used in polymorphic output, e.g.
    `"email"` for an instance of `Email`.
    """
    return underscore(type(obj).__name__)


def read_identifier(obj: Any, *, path: tuple[str | int, ...] = ()) -> Any:
    """
    Read an associated object's identifier.
    """
    return read_attribute(obj, IDENTIFIER_NAME, path=path)


def find_serializer(
    obj: Any,
    *,
    spec: AssociationSpec | None = None,
    owner: type[Serializer] | None = None,
    path: tuple[str | int, ...] = (),
) -> type[Serializer]:
    """
    Determine the serializer for an associated object, in order:

    1. Explicit serializer of the association
    2. For polymorphic associations, the object's own declared serializer
    3. Serializer conventionally named after the object's type
    4. The object's own declared serializer

    :raises UnresolvableSerializerError: If no serializer is found
    """
    if spec is not None and spec.serializer is not None:
        return spec.serializer

    if spec is not None and spec.polymorphic:
        if isinstance(obj, SelfDescribingSerializable):
            return obj.serializer_class()
        raise UnresolvableSerializerError(
            f"Polymorphic association '{spec.name}' resolved to {type(obj).__name__} "
            "object which doesn't declare a serializer",
            path=path,
        )

    if serializer := get_registry().find(type(obj), owner=owner):
        return serializer

    if isinstance(obj, SelfDescribingSerializable):
        return obj.serializer_class()

    raise UnresolvableSerializerError(
        f"No serializer found for {type(obj).__name__} object {obj!r}", path=path
    )


class AssociationResolver:
    """
    Resolves association values for a serializer.

    Nested serializers share the serializer's context, so side-loaded entities from
    any depth land in the same collector.
    """

    def resolve(self, serializer: Serializer, spec: AssociationSpec) -> Any:
        """
        Get the value of an association: `None`, a single result, or a list of
        results.
        """
        context = serializer.context
        descriptor = type(serializer).descriptor()
        embed = descriptor.effective_embed(spec)
        include = embed == "ids" and descriptor.effective_include(spec)

        if include and context.collector is None:
            raise IncludeWithoutSideloadRootError(
                type(serializer).__name__, spec.name, path=context.path
            )

        value = self.fetch(serializer, spec)

        with context.enter(spec.output_key):
            if include and not spec.polymorphic:
                # bucket is present even if nothing is associated
                assert context.collector is not None
                context.collector.ensure(self._bucket_key(spec, None))

            if not spec.is_many:
                return self._resolve_item(serializer, spec, value, embed, include)

            results: list[Any] = []
            for i, item in enumerate(self._iter_items(serializer, spec, value)):
                with context.enter(i):
                    results.append(
                        self._resolve_item(serializer, spec, item, embed, include)
                    )
            return results

    def fetch(self, serializer: Serializer, spec: AssociationSpec) -> Any:
        """
        Fetch raw associated value via serializer override or generic read.
        """
        value = find_override(serializer, spec.method_name)
        if value is MISSING:
            value = serializer.read_attribute(spec.name)
        return value

    def _iter_items(
        self, serializer: Serializer, spec: AssociationSpec, value: Any
    ) -> Iterable[Any]:
        if value is None:
            return ()
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise ConfigurationError(
                f"Association '{spec.name}' of {type(serializer).__name__} is declared "
                f"with many cardinality but got {type(value).__name__} object",
                path=serializer.context.path,
            )
        return value

    def _resolve_item(
        self,
        serializer: Serializer,
        spec: AssociationSpec,
        obj: Any,
        embed: EmbedModeType,
        include: bool,
    ) -> Any:
        if obj is None:
            return None

        if embed == "ids":
            payload = read_identifier(obj, path=serializer.context.path)
            if include:
                self._sideload(serializer, spec, obj, payload)
        else:
            payload = self._serialize_nested(serializer, spec, obj)

        if not spec.polymorphic:
            return payload

        tag = type_tag(obj)
        if embed == "ids":
            return {"type": tag, IDENTIFIER_NAME: payload}
        return {"type": tag, tag: payload}

    def _serialize_nested(
        self, serializer: Serializer, spec: AssociationSpec, obj: Any
    ) -> Any:
        context = serializer.context
        serializer_cls = find_serializer(
            obj, spec=spec, owner=type(serializer), path=context.path
        )
        with context.visit(obj):
            return serializer_cls(obj, context=context).serialize()

    def _sideload(
        self, serializer: Serializer, spec: AssociationSpec, obj: Any, identifier: Any
    ):
        context = serializer.context
        collector = context.collector
        assert collector is not None

        bucket = self._bucket_key(spec, obj)
        if identifier is not None and not collector.claim(bucket, identifier):
            return

        serializer_cls = find_serializer(
            obj, spec=spec, owner=type(serializer), path=context.path
        )
        logger.debug(
            "Serializing %s object for bucket '%s' via %s",
            type(obj).__name__,
            bucket,
            serializer_cls.__name__,
        )
        document = serializer_cls(obj, context=context).serialize()
        collector.register(bucket, identifier, document)

    def _bucket_key(self, spec: AssociationSpec, obj: Any) -> str:
        """
        Get key of the top-level bucket for side-loaded objects: the association's
        dedicated root, else the pluralized type tag for polymorphic associations,
        else the pluralized association name regardless of its output key.
        """
        if spec.root:
            return spec.root
        if spec.polymorphic:
            assert obj is not None
            return pluralize(type_tag(obj))
        return pluralize(spec.method_name)
