import re
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError


# Слова через одиночные "." или "-", домен оканчивается на .xx/.xxx
EMAIL_PATTERN = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII)

SortField = Literal["name", "email", "feedback", "category", "timestamp"]
SortDirection = Literal["asc", "desc"]

SORTABLE_FIELDS: tuple[str, ...] = ("name", "email", "feedback", "category", "timestamp")


def format_category_name(category: str) -> str:
    """bug_report -> Bug Report"""
    return " ".join(word[:1].upper() + word[1:] for word in category.split("_"))


class FeedbackCategory(str, Enum):
    SUGGESTION = "suggestion"
    BUG_REPORT = "bug_report"
    FEATURE_REQUEST = "feature_request"
    OTHER = "other"

    @property
    def label(self) -> str:
        return format_category_name(self.value)


CATEGORY_VALUES: tuple[str, ...] = tuple(c.value for c in FeedbackCategory)


def _require(value: Any, message: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("required", message)
    return value


class FeedbackCreate(BaseModel):
    """Входящий отзыв. Ошибки валидации несут готовые сообщения для клиента."""

    name: str = Field(default=None, validate_default=True)
    email: str = Field(default=None, validate_default=True)
    feedback: str = Field(default=None, validate_default=True)
    category: FeedbackCategory = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> Any:
        value = _require(value, "Please add a name")
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> Any:
        value = _require(value, "Please add an email")
        if isinstance(value, str) and not EMAIL_PATTERN.fullmatch(value):
            raise PydanticCustomError("email_invalid", "Please add a valid email")
        return value

    @field_validator("feedback", mode="before")
    @classmethod
    def _check_feedback(cls, value: Any) -> Any:
        return _require(value, "Please add feedback text")

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> Any:
        if value is None or value == "":
            return FeedbackCategory.OTHER
        if isinstance(value, FeedbackCategory):
            return value
        if value not in CATEGORY_VALUES:
            raise PydanticCustomError(
                "category_invalid",
                "'{value}' is not a valid category",
                {"value": str(value)},
            )
        return value


class FeedbackRecord(BaseModel):
    id: str
    name: str
    email: str
    feedback: str
    category: FeedbackCategory = FeedbackCategory.OTHER
    timestamp: datetime


class FeedbackCreateResponse(BaseModel):
    success: bool = True
    data: FeedbackRecord


class FeedbackListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[FeedbackRecord]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str | list[str]


class SortSpec(BaseModel):
    field: SortField
    direction: SortDirection = "asc"

    def to_order(self) -> str:
        """Параметр order для PostgREST."""
        return f"{self.field}.{self.direction}"

    def to_param(self) -> str:
        return f"{self.field}:{self.direction}"


DEFAULT_SORT = SortSpec(field="timestamp", direction="desc")
