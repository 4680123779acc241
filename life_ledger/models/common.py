from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for request/response bodies: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self, exclude_unset: bool = False) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)


class SuccessResponse(BaseModel):
    success: bool = True
