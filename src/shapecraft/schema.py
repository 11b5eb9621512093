"""
Description of a serializer's output in terms of its model class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationError
from .typedefs import SupportsSchemaReflection

if TYPE_CHECKING:
    from .serializer import Serializer

__all__ = [
    "build_schema",
]


def build_schema(serializer_cls: type[Serializer]) -> dict[str, Any]:
    """
    Build schema of serializer from its `model_class`:

    - `"attributes"`: Output key to column type; `None` if the model has no such
      column
    - `"associations"`: Output key to `{macro: name}` as reflected by the model,
      falling back to the declared cardinality
    """
    model = serializer_cls.model_class
    if not isinstance(model, SupportsSchemaReflection):
        raise ConfigurationError(
            f"{serializer_cls.__name__}.model_class must provide columns_hash() and "
            "reflect_on_association()"
        )

    columns = model.columns_hash()
    descriptor = serializer_cls.descriptor()

    attributes: dict[str, Any] = {}
    for spec in descriptor.attributes:
        column = columns.get(spec.name) or columns.get(spec.method_name)
        attributes[spec.output_key] = getattr(column, "type", column)

    associations: dict[str, Any] = {}
    for spec in descriptor.associations:
        if reflection := model.reflect_on_association(spec.name):
            associations[spec.output_key] = {reflection.macro: reflection.name}
        else:
            macro = "has_many" if spec.is_many else "has_one"
            associations[spec.output_key] = {macro: spec.name}

    return {"attributes": attributes, "associations": associations}
