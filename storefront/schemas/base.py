"""
Base schemas with common functionality.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Type, TypeVar, Any

T = TypeVar('T', bound='BaseSchema')

class BaseSchema(BaseModel):
    """Base schema with common functionality for all schemas

    Fields are snake_case in Python and camelCase on the wire, which is what
    the storefront front end sends and expects back.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @classmethod
    def from_payload(cls: Type[T], payload: Any) -> T:
        """Create a schema instance from a loose dict or another model"""
        if isinstance(payload, cls):
            return payload
        return cls.model_validate(payload)

    def to_payload(self) -> dict:
        """Serialize with wire (camelCase) names, dropping unset optionals"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class FrozenSchema(BaseSchema):
    """Immutable value object"""

    model_config = ConfigDict(frozen=True)
