"""
Resolution of declared fields against source objects.
"""

from .associations import AssociationResolver, find_serializer
from .attributes import AttributeResolver, read_attribute

__all__ = [
    "AttributeResolver",
    "AssociationResolver",
    "find_serializer",
    "read_attribute",
]
