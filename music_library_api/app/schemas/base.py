"""
Shared pydantic configuration.

Python attributes use snake_case while the JSON wire format (and the
stored documents) use camelCase, e.g. ``projection_style`` travels as
``projectionStyle``.  Both spellings are accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
