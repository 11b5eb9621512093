"""
Exception classes.
"""

from __future__ import annotations

__all__ = [
    "SerializerError",
    "ConfigurationError",
    "IncludeWithoutSideloadRootError",
    "UnresolvableSerializerError",
    "CircularReferenceError",
    "format_path",
]


def format_path(path: tuple[str | int, ...]) -> str:
    """
    Path tuple formatted as dot notation.

    Examples:

    - `('post', 'comments', 1, 'tags') -> "post.comments[1].tags"`
    - `(0, 'author') -> "[0].author"`
    - `() -> "<root>"`
    """
    if not path:
        return "<root>"
    parts: list[str] = []
    for i, segment in enumerate(path):
        if isinstance(segment, int):
            # index: append as [n]
            parts.append(f"[{segment}]")
        else:
            # field name: prefix with dot
            prefix = "." if i != 0 else ""
            parts.append(f"{prefix}{segment}")
    return "".join(parts)


class SerializerError(Exception):
    """
    Base class for errors raised while building a document.

    Errors are fatal: the first one aborts the whole top-level call.
    """

    message: str
    """
    Description of the error without location.
    """

    path: tuple[str | int, ...]
    """
    Location in the object graph at which the error was detected.
    """

    def __init__(self, message: str, *, path: tuple[str | int, ...] = ()):
        self.message = message
        self.path = path
        super().__init__(f"{format_path(path)}: {message}")


class ConfigurationError(SerializerError):
    """
    A declared attribute or association can't be resolved on the source object, or
    the declarations themselves are inconsistent.
    """


class IncludeWithoutSideloadRootError(SerializerError):
    """
    An association requests side-loading outside of a call which established a
    side-loading root.
    """

    def __init__(
        self, serializer_name: str, name: str, *, path: tuple[str | int, ...] = ()
    ):
        super().__init__(
            f"{serializer_name} cannot include associations without a side-loading "
            f"root: '{name}'",
            path=path,
        )


class UnresolvableSerializerError(SerializerError):
    """
    No serializer could be determined for an associated object or collection
    element.
    """


class CircularReferenceError(SerializerError):
    """
    An object embedded as a nested document refers back to an object currently
    being serialized.
    """
