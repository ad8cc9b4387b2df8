"""Shared response envelope and base schema."""

import math
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for request/response models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    pages: int


def dump(data: Any) -> Any:
    """Serialize models (or lists of models) with camelCase keys."""
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, mode="json")
    if isinstance(data, list):
        return [dump(item) for item in data]
    return data


def success(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    """Build a ``{success: true, data, message?}`` envelope."""
    body = {"success": True}
    if data is not None:
        body["data"] = dump(data)
    if message:
        body["message"] = message
    body.update(extra)
    return body


def paginated(items: list, page: int, limit: int, total: int) -> dict:
    """Build a list envelope with ``pagination`` metadata."""
    pagination = Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
    )
    return success(items, pagination=dump(pagination))


def failure(error: str, message: Optional[str] = None, data: Any = None) -> dict:
    """Build a ``{success: false, error, message?, data?}`` envelope."""
    body = {"success": False, "error": error}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = dump(data)
    return body
