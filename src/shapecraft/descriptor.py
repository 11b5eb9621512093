"""
Declarative per-serializer configuration and the immutable descriptor built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Iterable, Literal

from .exceptions import ConfigurationError
from .inflection import strip_query_marker
from .settings import EMBED_MODES, get_settings
from .typedefs import CardinalityType, EmbedModeType

if TYPE_CHECKING:
    from .serializer import Serializer

__all__ = [
    "AttributeSpec",
    "AssociationSpec",
    "RootPolicy",
    "Descriptor",
    "SerializerConfig",
    "attribute",
    "has_one",
    "has_many",
    "merge_descriptor",
]


@dataclass(frozen=True, kw_only=True)
class AttributeSpec:
    """
    Declared attribute.
    """

    name: str
    """
    Source name, possibly ending in a query marker.
    """

    key: str | None = None
    """
    Explicit output key.
    """

    @property
    def method_name(self) -> str:
        """
        Name of override and predicate methods, with any query marker stripped.
        """
        return strip_query_marker(self.name)

    @property
    def output_key(self) -> str:
        return self.key or self.method_name


@dataclass(frozen=True, kw_only=True)
class AssociationSpec:
    """
    Declared association.
    """

    name: str
    """
    Source name used to fetch the associated object(s).
    """

    cardinality: CardinalityType
    """
    Whether a single object or a collection is associated.
    """

    key: str | None = None
    """
    Explicit output key.
    """

    serializer: type[Serializer] | None = None
    """
    Explicit serializer for associated objects.
    """

    embed: EmbedModeType | None = None
    """
    Embed mode, or `None` to use the descriptor's.
    """

    include: bool | None = None
    """
    Whether to side-load associated objects at the document root when embedding ids,
    or `None` to use the descriptor's.
    """

    polymorphic: bool = False
    """
    Whether the associated type varies; output is then tagged with the concrete type.
    """

    root: str | None = None
    """
    Dedicated key of the side-load bucket.
    """

    def __post_init__(self):
        if self.embed is not None and self.embed not in EMBED_MODES:
            raise ConfigurationError(
                f"Association '{self.name}' has invalid embed mode '{self.embed}'"
            )

    @property
    def method_name(self) -> str:
        return strip_query_marker(self.name)

    @property
    def output_key(self) -> str:
        return self.key or self.method_name

    @property
    def is_many(self) -> bool:
        return self.cardinality == "many"


@dataclass(frozen=True)
class RootPolicy:
    """
    Rule determining whether and how a document is wrapped under a root key.
    """

    kind: Literal["auto", "explicit", "suppressed"] = "auto"
    name: str | None = None

    @classmethod
    def from_declaration(cls, root: str | Literal[False]) -> RootPolicy:
        if root is False:
            return cls("suppressed")
        if not isinstance(root, str) or not root:
            raise ConfigurationError(f"Invalid root declaration: {root!r}")
        return cls("explicit", root)


@dataclass(frozen=True, kw_only=True)
class Descriptor:
    """
    Immutable serialization configuration of a serializer class, built once when the
    class is created.
    """

    attributes: tuple[AttributeSpec, ...] = ()
    associations: tuple[AssociationSpec, ...] = ()
    root: RootPolicy = RootPolicy()

    embed: EmbedModeType | None = None
    """
    Default embed mode of associations, or `None` to use settings.
    """

    embed_in_root: bool = False
    """
    Default side-loading flag of associations.
    """

    def get_attribute(self, name: str) -> AttributeSpec | None:
        return next((a for a in self.attributes if a.name == name), None)

    def get_association(self, name: str) -> AssociationSpec | None:
        return next((a for a in self.associations if a.name == name), None)

    def effective_embed(self, spec: AssociationSpec) -> EmbedModeType:
        """
        Get embed mode of association: its own, else this descriptor's, else the
        process default.
        """
        return spec.embed or self.embed or get_settings().default_embed

    def effective_include(self, spec: AssociationSpec) -> bool:
        return self.embed_in_root if spec.include is None else spec.include


@dataclass(kw_only=True)
class SerializerConfig:
    """
    Configures serializer. Set as `serializer_config` on a subclass of `Serializer`.
    """

    attributes: Iterable[str | AttributeSpec] = ()
    """
    Attributes to serialize, in output order. Names ending in `?` are query
    attributes whose output key omits the marker.
    """

    associations: Iterable[AssociationSpec] = ()
    """
    Associations created with `has_one()` / `has_many()`.
    """

    root: str | Literal[False] | None = None
    """
    Root key of documents:

    - `str`: Explicit root key
    - `False`: No root; the fragment is the document
    - `None`: Inherit from parent serializer, else derive from the class name
    """

    embed: EmbedModeType | None = None
    """
    Default embed mode of associations.
    """

    embed_in_root: bool | None = None
    """
    Default for side-loading associations embedded as ids.
    """


def attribute(name: str, *, key: str | None = None) -> AttributeSpec:
    """
    Declare an attribute with an optional output key.
    """
    return AttributeSpec(name=name, key=key)


def has_one(
    name: str,
    *,
    key: str | None = None,
    serializer: type[Serializer] | None = None,
    embed: EmbedModeType | None = None,
    include: bool | None = None,
    polymorphic: bool = False,
    root: str | None = None,
) -> AssociationSpec:
    """
    Declare an association to a single object.
    """
    return AssociationSpec(
        name=name,
        cardinality="one",
        key=key,
        serializer=serializer,
        embed=embed,
        include=include,
        polymorphic=polymorphic,
        root=root,
    )


def has_many(
    name: str,
    *,
    key: str | None = None,
    serializer: type[Serializer] | None = None,
    embed: EmbedModeType | None = None,
    include: bool | None = None,
    polymorphic: bool = False,
    root: str | None = None,
) -> AssociationSpec:
    """
    Declare an association to a collection of objects.
    """
    return AssociationSpec(
        name=name,
        cardinality="many",
        key=key,
        serializer=serializer,
        embed=embed,
        include=include,
        polymorphic=polymorphic,
        root=root,
    )


def merge_descriptor(
    parent: Descriptor | None, config: SerializerConfig | None
) -> Descriptor:
    """
    Create descriptor from parent's descriptor and a config: field lists are
    concatenated with the config's entries replacing same-named parent entries in
    place, and root/embed settings are overridden where the config sets them.
    """
    base = parent or Descriptor()
    if config is None:
        return base

    attributes = _merge_specs(
        base.attributes,
        tuple(
            a if isinstance(a, AttributeSpec) else AttributeSpec(name=a)
            for a in config.attributes
        ),
    )
    for spec in config.associations:
        if not isinstance(spec, AssociationSpec):
            raise ConfigurationError(
                f"Expected association declared via has_one()/has_many(), got {spec!r}"
            )
    associations = _merge_specs(base.associations, tuple(config.associations))

    if config.embed is not None and config.embed not in EMBED_MODES:
        raise ConfigurationError(f"Invalid embed mode '{config.embed}'")

    _check_unique_keys(attributes, associations)

    return replace(
        base,
        attributes=attributes,
        associations=associations,
        root=(
            base.root
            if config.root is None
            else RootPolicy.from_declaration(config.root)
        ),
        embed=config.embed or base.embed,
        embed_in_root=(
            base.embed_in_root if config.embed_in_root is None else config.embed_in_root
        ),
    )


def _merge_specs[SpecT: (AttributeSpec, AssociationSpec)](
    inherited: tuple[SpecT, ...], own: tuple[SpecT, ...]
) -> tuple[SpecT, ...]:
    own_by_name: dict[str, Any] = {}
    for spec in own:
        if spec.name in own_by_name:
            raise ConfigurationError(f"Duplicate declaration of '{spec.name}'")
        own_by_name[spec.name] = spec

    # override inherited entries in place, then append new ones
    merged = [own_by_name.pop(s.name, s) for s in inherited]
    merged += [s for s in own if s.name in own_by_name]
    return tuple(merged)


def _check_unique_keys(
    attributes: tuple[AttributeSpec, ...], associations: tuple[AssociationSpec, ...]
):
    seen: set[str] = set()
    for spec in (*attributes, *associations):
        if spec.output_key in seen:
            raise ConfigurationError(f"Duplicate output key '{spec.output_key}'")
        seen.add(spec.output_key)
