# common_schema.py
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope every endpoint answers with."""
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


def blank_to_none(value: Any) -> Any:
    """Treat empty / whitespace-only strings from form posts as missing values."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
