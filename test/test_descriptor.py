"""
Test declarations and their inheritance.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

from pytest import raises

from shapecraft import (
    AssociationSpec,
    AttributeSpec,
    ConfigurationError,
    Descriptor,
    RootPolicy,
    Serializer,
    SerializerConfig,
    attribute,
    has_many,
    has_one,
    merge_descriptor,
)


class BaseSerializer(Serializer):
    serializer_config = SerializerConfig(
        root="base",
        embed="ids",
        attributes=("id", "name"),
        associations=(has_many("tags"),),
    )


class ChildSerializer(BaseSerializer):
    serializer_config = SerializerConfig(
        attributes=(attribute("name", key="title"), "created_at"),
        associations=(has_one("owner"), has_many("tags", embed="objects")),
    )


def test_inheritance():
    """
    Test parent declarations are kept with same-named ones replaced in place.
    """
    descriptor = ChildSerializer.descriptor()

    assert [a.output_key for a in descriptor.attributes] == [
        "id",
        "title",
        "created_at",
    ]
    assert [a.name for a in descriptor.associations] == ["tags", "owner"]

    tags = descriptor.get_association("tags")
    assert tags is not None
    assert tags.embed == "objects"
    assert tags.is_many

    owner = descriptor.get_association("owner")
    assert owner is not None
    assert not owner.is_many

    assert descriptor.root == RootPolicy("explicit", "base")
    assert descriptor.embed == "ids"

    # parent unaffected
    base = BaseSerializer.descriptor()
    assert [a.output_key for a in base.attributes] == ["id", "name"]
    assert [a.name for a in base.associations] == ["tags"]


def test_inherit_without_config():
    """
    Test subclass without config shares its parent's descriptor.
    """

    class PlainChildSerializer(ChildSerializer):
        pass

    assert PlainChildSerializer.descriptor() is ChildSerializer.descriptor()


def test_effective_embed():
    """
    Test embed and include falling back to descriptor and settings.
    """
    descriptor = ChildSerializer.descriptor()
    tags = descriptor.get_association("tags")
    owner = descriptor.get_association("owner")
    assert tags and owner

    assert descriptor.effective_embed(tags) == "objects"
    assert descriptor.effective_embed(owner) == "ids"
    assert Descriptor().effective_embed(owner) == "objects"

    assert not descriptor.effective_include(owner)
    assert descriptor.effective_include(
        AssociationSpec(name="x", cardinality="one", include=True)
    )


def test_query_attribute_spec():
    """
    Test query marker dropped from method name and output key.
    """
    spec = AttributeSpec(name="overdue?")
    assert spec.method_name == "overdue"
    assert spec.output_key == "overdue"
    assert attribute("overdue?", key="late").output_key == "late"


def test_descriptor_immutable():
    """
    Test descriptor can't be modified.
    """
    descriptor = ChildSerializer.descriptor()

    with raises(FrozenInstanceError):
        descriptor.root = RootPolicy()  # type: ignore

    assert isinstance(descriptor.attributes, tuple)


def test_root_declarations():
    """
    Test root policies created from declarations.
    """
    assert RootPolicy.from_declaration(False) == RootPolicy("suppressed")
    assert RootPolicy.from_declaration("post") == RootPolicy("explicit", "post")

    with raises(ConfigurationError):
        RootPolicy.from_declaration("")


def test_suppressed_root_inherited_and_overridden():
    """
    Test suppressed root inherited until a subclass sets one.
    """

    class NoRootSerializer(BaseSerializer):
        serializer_config = SerializerConfig(root=False)

    class RootAgainSerializer(NoRootSerializer):
        serializer_config = SerializerConfig(root="again")

    assert NoRootSerializer.descriptor().root.kind == "suppressed"
    assert RootAgainSerializer.descriptor().root == RootPolicy("explicit", "again")


def test_merge_descriptor():
    """
    Test merging configs directly.
    """
    parent = merge_descriptor(None, SerializerConfig(attributes=("a", "b")))
    assert merge_descriptor(parent, None) is parent

    child = merge_descriptor(
        parent, SerializerConfig(attributes=("c",), embed_in_root=True)
    )
    assert [a.name for a in child.attributes] == ["a", "b", "c"]
    assert child.embed_in_root
    assert child.root == RootPolicy()


def test_duplicate_declaration():
    """
    Test error for a name declared twice.
    """
    with raises(ConfigurationError, match="Duplicate declaration of 'name'"):

        class DuplicateSerializer(Serializer):
            serializer_config = SerializerConfig(attributes=("name", "name"))


def test_duplicate_output_key():
    """
    Test error for fields sharing an output key.
    """
    with raises(ConfigurationError, match="Duplicate output key 'title'"):

        class ConflictingSerializer(Serializer):
            serializer_config = SerializerConfig(
                attributes=("title", attribute("name", key="title"))
            )

    with raises(ConfigurationError, match="Duplicate output key 'tags'"):

        class ConflictingAssociationSerializer(Serializer):
            serializer_config = SerializerConfig(
                attributes=("tags",), associations=(has_many("tags"),)
            )


def test_invalid_embed():
    """
    Test error for an unknown embed mode.
    """
    with raises(ConfigurationError):
        has_one("owner", embed="inline")  # type: ignore

    with raises(ConfigurationError):

        class InvalidEmbedSerializer(Serializer):
            serializer_config = SerializerConfig(embed="inline")  # type: ignore


def test_invalid_association():
    """
    Test error for an association not declared via helpers.
    """
    with raises(ConfigurationError):

        class InvalidAssociationSerializer(Serializer):
            serializer_config = SerializerConfig(
                associations=("owner",)  # type: ignore
            )
