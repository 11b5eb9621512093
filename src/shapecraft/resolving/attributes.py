"""
Resolution of attribute values from source objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..descriptor import AttributeSpec
from ..exceptions import ConfigurationError
from ..inflection import strip_query_marker
from ..typedefs import SupportsReadAttribute

if TYPE_CHECKING:
    from ..serializer import Serializer

__all__ = [
    "AttributeResolver",
    "read_attribute",
    "find_override",
]


class _Missing:
    pass


MISSING = _Missing()
"""
Sentinel for a name that couldn't be resolved.
"""


def read_attribute(
    obj: Any, name: str, /, *, path: tuple[str | int, ...] = ()
) -> Any:
    """
    Read a named value from a source object using its generic capabilities:

    1. `obj.read_attribute(name)` if implemented
    2. Key lookup if `obj` is a mapping
    3. Attribute lookup; callables are invoked for query names like `"overdue?"`

    :param path: Location reported if the name can't be resolved
    :raises ConfigurationError: If the name can't be resolved
    """
    value = _read(obj, name)
    if value is MISSING:
        raise ConfigurationError(
            f"Can't resolve '{name}' on {type(obj).__name__} object {obj!r}",
            path=path,
        )
    return value


def find_override(serializer: Serializer, name: str) -> Any:
    """
    Get the value of a member named `name` defined by the serializer's class or any
    parent class below `Serializer`, or `MISSING`. Methods are called without
    arguments.
    """
    from ..serializer import Serializer

    for cls in type(serializer).__mro__:
        if cls is Serializer:
            break
        if name not in vars(cls):
            continue
        member = getattr(serializer, name)
        if isinstance(vars(cls)[name], property) or not callable(member):
            return member
        return member()
    return MISSING


class AttributeResolver:
    """
    Resolves attribute values for a serializer: a same-named override on the
    serializer takes precedence over the serializer's generic read.
    """

    def resolve(self, serializer: Serializer, spec: AttributeSpec) -> Any:
        value = find_override(serializer, spec.method_name)
        if value is not MISSING:
            return value
        return serializer.read_attribute(spec.name)


def _read(obj: Any, name: str) -> Any:
    if isinstance(obj, SupportsReadAttribute) and not isinstance(obj, type):
        return obj.read_attribute(name)

    stripped = strip_query_marker(name)

    if isinstance(obj, Mapping):
        for key in dict.fromkeys((name, stripped)):
            if key in obj:
                return obj[key]
        return MISSING

    try:
        value = getattr(obj, stripped)
    except AttributeError:
        return MISSING

    if stripped != name and callable(value):
        return value()
    return value
