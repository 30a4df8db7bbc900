"""Response envelope and shared schema base.

Every successful response is ``{"success": true, "data": ..., "message": ...}``
and every failure is ``{"success": false, "error": ..., "message": ...}``.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from question_api.db.models import as_utc

# Timestamps always leave the API with an explicit UTC offset
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Schema base: camelCase on the wire, snake_case in Python; accepts either on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_dump(item) for item in data]
    if isinstance(data, dict):
        return {key: _dump(value) for key, value in data.items()}
    return data


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"success": True, "data": _dump(data), "message": message}


def error_response(error: str, message: str) -> dict:
    return {"success": False, "error": error, "message": message}
