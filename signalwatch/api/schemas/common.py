"""Shared base model for API schemas.

Field names stay snake_case in Python and are exposed in camelCase on the
wire (``device_id`` <-> ``deviceId``). Either form is accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
