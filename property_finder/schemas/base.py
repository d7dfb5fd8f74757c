"""
Shared schema base classes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CamelORMModel(CamelModel):
    """CamelCase schema that can be built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)
