"""
Declarative serializers: per-type configuration driving conversion of an object graph
to a document.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Literal, Mapping

from .context import SerializationContext
from .descriptor import Descriptor, SerializerConfig, merge_descriptor
from .exceptions import ConfigurationError
from .inflection import underscore
from .registry import SERIALIZER_SUFFIX, get_registry
from .resolving.associations import AssociationResolver
from .resolving.attributes import AttributeResolver, read_attribute
from .typedefs import DocumentType

__all__ = [
    "Serializer",
]

INCLUDE_ASSOCIATIONS_HOOK = "include_associations"

logger = logging.getLogger(__name__)

_attribute_resolver = AttributeResolver()
_association_resolver = AssociationResolver()


class Serializer:
    """
    Base class for serializers. Subclasses declare what to serialize by setting
    `serializer_config`; declarations are inherited and may be overridden by name.

    Subclasses may customize output by:

    - Defining a method or property named after an attribute or association, which
      replaces reading it from the object
    - Defining `include_<name>()` returning whether to output a field
    - Overriding `include_associations()` to select associations via `include()`
    - Overriding `serialize()` to produce the whole fragment, typically starting from
      `attributes()`
    """

    serializer_config: ClassVar[SerializerConfig | None] = None
    """
    Set on subclass to configure this serializer.
    """

    model_class: ClassVar[Any] = None
    """
    Optionally set on subclass to the class of serialized objects, enabling `schema()`.
    """

    __descriptor: ClassVar[Descriptor] = Descriptor()
    """
    Descriptor built from this class's config and its parent's descriptor.
    """

    __object: Any
    __context: SerializationContext
    __included: list[str] | None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        # only this class's own config is merged; inherited declarations come
        # through the parent's descriptor
        parent = next(
            (b.descriptor() for b in cls.__mro__[1:] if issubclass(b, Serializer)),
            None,
        )
        cls.__descriptor = merge_descriptor(parent, vars(cls).get("serializer_config"))
        get_registry().register(cls)

    def __init__(
        self,
        obj: Any,
        /,
        *,
        scope: Any = None,
        context: SerializationContext | None = None,
        **options: Any,
    ):
        if context is not None and (scope is not None or options):
            raise ValueError("Can't pass scope or options along with a context")
        self.__object = obj
        self.__context = context or SerializationContext(scope=scope, options=options)
        self.__included = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.__object!r})"

    @classmethod
    def descriptor(cls) -> Descriptor:
        """
        Get the immutable configuration of this serializer.
        """
        return cls.__descriptor

    @classmethod
    def schema(cls) -> dict[str, Any]:
        """
        Describe attribute types and associations using `model_class` reflection.
        """
        from .schema import build_schema

        return build_schema(cls)

    @property
    def object(self) -> Any:
        """
        The object being serialized.
        """
        return self.__object

    @property
    def context(self) -> SerializationContext:
        return self.__context

    @property
    def scope(self) -> Any:
        return self.__context.scope

    @property
    def options(self) -> Mapping[str, Any]:
        return self.__context.options

    def read_attribute(self, name: str, /) -> Any:
        """
        Generic read of a name from the object, used when no override exists.

        May be overridden to customize reading of all fields.
        """
        return read_attribute(self.__object, name, path=self.__context.path)

    def attributes(self) -> dict[str, Any]:
        """
        Get declared attributes keyed by output key, omitting those excluded by an
        `include_<name>()` predicate.
        """
        values: dict[str, Any] = {}
        for spec in self.descriptor().attributes:
            if not self._check_include(spec.method_name):
                continue
            with self.__context.enter(spec.output_key):
                values[spec.output_key] = _attribute_resolver.resolve(self, spec)
        return values

    def associations(self) -> dict[str, Any]:
        """
        Get associations selected by `include_associations()` keyed by output key,
        omitting those excluded by an `include_<name>()` predicate.
        """
        descriptor = self.descriptor()

        self.__included = []
        try:
            self.include_associations()
            included = list(dict.fromkeys(self.__included))
        finally:
            self.__included = None

        values: dict[str, Any] = {}
        for name in included:
            spec = descriptor.get_association(name)
            assert spec
            if not self._check_include(spec.method_name):
                continue
            values[spec.output_key] = _association_resolver.resolve(self, spec)
        return values

    def include_associations(self):
        """
        Select associations to output by calling `include()`; includes all declared
        associations by default.
        """
        for spec in self.descriptor().associations:
            self.include(spec.name)

    def include(self, name: str, /):
        """
        Select an association for output. Only valid within `include_associations()`.
        """
        if self.__included is None:
            raise RuntimeError("include() called outside of include_associations()")
        if self.descriptor().get_association(name) is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no association '{name}'",
                path=self.__context.path,
            )
        self.__included.append(name)

    def serialize(self) -> dict[str, Any]:
        """
        Get the fragment for the object: attributes followed by associations, without
        root.
        """
        return {**self.attributes(), **self.associations()}

    def to_document(self, *, root: str | Literal[False] | None = None) -> DocumentType:
        """
        Get the complete document: the fragment wrapped under the root key with
        side-loaded entities beside it, or just the fragment if there is no root.
        If called while another document is under construction in the same context,
        the fragment is wrapped but side-loaded entities stay with that document.

        :param root: Root key overriding options and configuration, or `False` to \
        suppress it
        """
        root_key = self.root_key(root)
        if root_key is None:
            with self.__context.visit(self.__object):
                return self.serialize()

        if self.__context.collector is not None:
            # side-loaded entities stay with the enclosing document
            with self.__context.visit(self.__object):
                return {root_key: self.serialize()}

        logger.debug("Serializing %r under root '%s'", self, root_key)
        with self.__context.establish_root() as document:
            with self.__context.visit(self.__object):
                document[root_key] = self.serialize()
            assert self.__context.collector is not None
            self.__context.collector.merge_into(document, root_key)
        return document

    def root_key(self, root: str | Literal[False] | None = None) -> str | None:
        """
        Resolve the root key of the document, in order of precedence:

        1. `root` argument
        2. `root` option
        3. Root configured on this serializer or inherited
        4. Name derived from this class, e.g. `BlogPostSerializer -> "blog_post"`,
           or from the object's type if the class name lacks the suffix
        """
        for candidate in (root, self.options.get("root")):
            if candidate is False:
                return None
            if candidate is not None:
                return str(candidate)

        policy = self.descriptor().root
        if policy.kind == "suppressed":
            return None
        if policy.kind == "explicit":
            assert policy.name
            return policy.name

        name = type(self).__name__
        if name.endswith(SERIALIZER_SUFFIX) and name != SERIALIZER_SUFFIX:
            return underscore(name[: -len(SERIALIZER_SUFFIX)])
        return underscore(type(self.__object).__name__)

    def _check_include(self, name: str) -> bool:
        """
        Invoke the `include_<name>()` predicate if defined. A field named
        `associations` has no predicate, as `include_associations()` is the
        association selection hook.
        """
        predicate_name = f"include_{name}"
        if predicate_name == INCLUDE_ASSOCIATIONS_HOOK:
            return True
        predicate = getattr(self, predicate_name, None)
        if predicate is None:
            return True
        return bool(predicate() if callable(predicate) else predicate)
