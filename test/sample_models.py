"""
Source objects and serializers shared by tests.
"""

from __future__ import annotations

from typing import Any

from shapecraft import Serializer, SerializerConfig, SerializerSupport, has_many


class Model:
    """
    Object storing attributes in a mapping, readable via `read_attribute()`.
    """

    def __init__(self, **attributes: Any):
        self.attributes = attributes

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attributes})"

    def read_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def as_document(self) -> dict[str, Any]:
        return {"model": "Model"}


class User(SerializerSupport):
    """
    Object using the serializer conventionally named after its type.
    """

    superuser: bool

    def __init__(self, **attributes: Any):
        self.attributes = {
            **attributes,
            "first_name": "Jose",
            "last_name": "Valim",
            "password": "oh noes yugive my password",
        }
        self.superuser = False

    def read_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def is_super_user(self) -> bool:
        return self.superuser


class Post(Model):
    def __init__(self, **attributes: Any):
        attributes.setdefault("comments", [])
        attributes.setdefault("comments_disabled", False)
        attributes.setdefault("author", None)
        super().__init__(**attributes)

    def serializer_class(self) -> type[Serializer]:
        return PostSerializer


class Comment(Model):
    def serializer_class(self) -> type[Serializer]:
        return CommentSerializer


class Blog(Model):
    pass


class UserSerializer(Serializer):
    """
    Serializer extending its attributes with a flag and the scope.
    """

    serializer_config = SerializerConfig(attributes=("first_name", "last_name"))

    def serialize(self) -> dict[str, Any]:
        return {**self.attributes(), "ok": True, **(self.scope or {})}


class DefaultUserSerializer(Serializer):
    serializer_config = SerializerConfig(attributes=("first_name", "last_name"))


class CommentSerializer(Serializer):
    """
    Serializer producing its fragment by hand.
    """

    def serialize(self) -> dict[str, Any]:
        return {"title": self.object.read_attribute("title")}


class PostSerializer(Serializer):
    serializer_config = SerializerConfig(
        attributes=("title", "body"),
        associations=(has_many("comments", serializer=CommentSerializer),),
    )
