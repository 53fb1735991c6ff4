"""Shared schema building blocks"""

from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from study_portal.core.shaping import bigint_to_str


class CamelModel(BaseModel):
    """
    Base schema: camelCase on the wire, snake_case in Python.
    Accepts either key style on input and reads ORM attributes.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _to_decimal_string(value):
    if value is None or isinstance(value, str):
        return value
    return bigint_to_str(value)


# 64-bit integers (file sizes) travel as decimal strings
BigIntString = Annotated[Optional[str], BeforeValidator(_to_decimal_string)]
