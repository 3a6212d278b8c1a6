"""
Base Pydantic schemas for pagecraft.

The dashboard and page editor speak camelCase JSON, so every schema uses a
camelCase alias generator while Python code keeps snake_case field names.
Both spellings are accepted on input; responses are serialized by alias.

Example:
    >>> class MetaRequest(RequestSchema):
    ...     main_keyword: str
    ...
    >>> MetaRequest.model_validate({"mainKeyword": "  ring sizes "}).main_keyword
    'ring sizes'
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# =============================================================================
# PYDANTIC V2 BASE CONFIGURATION
# =============================================================================

DEFAULT_CONFIG = ConfigDict(
    # camelCase on the wire
    alias_generator=to_camel,
    # Allow both alias and field name
    populate_by_name=True,
    # Use enum values instead of enum names
    use_enum_values=True,
    # String processing
    str_strip_whitespace=True,
)


class BaseSchema(BaseModel):
    """Base schema for all API schemas."""

    model_config = DEFAULT_CONFIG


class RequestSchema(BaseSchema):
    """Base schema for request bodies."""


class ResponseSchema(BaseSchema):
    """Base schema for response bodies."""


__all__ = [
    "DEFAULT_CONFIG",
    "BaseSchema",
    "RequestSchema",
    "ResponseSchema",
]
