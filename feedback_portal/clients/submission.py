import re
from typing import Callable

from pydantic import BaseModel

from feedback_portal.feedback.schemas import FeedbackCategory
from feedback_portal.logging_config import get_logger
from .api import FeedbackApiClient, FeedbackApiError

logger = get_logger(__name__)

CLIENT_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

SUBMIT_FAILED_MESSAGE = "Failed to submit feedback. Please try again later."


class FeedbackForm(BaseModel):
    name: str = ""
    email: str = ""
    feedback: str = ""
    category: FeedbackCategory = FeedbackCategory.OTHER

    def field_errors(self) -> dict[str, str]:
        """Проверки до отправки. Пустой словарь = форму можно отправлять."""
        errors: dict[str, str] = {}
        if not self.name:
            errors["name"] = "Name is required"
        if not self.email:
            errors["email"] = "Email is required"
        elif not CLIENT_EMAIL_PATTERN.search(self.email):
            errors["email"] = "Email is invalid"
        if not self.feedback:
            errors["feedback"] = "Feedback is required"
        return errors

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "feedback": self.feedback,
            "category": self.category.value,
        }


class SubmissionResult(BaseModel):
    success: bool
    error: str | None = None
    field_errors: dict[str, str] = {}
    record: dict | None = None


class SubmissionClient:
    """Отправка отзыва из формы с сигналом обновления дашборда."""
    
    def __init__(
        self,
        api: FeedbackApiClient,
        on_submitted: Callable[[], None] | None = None
    ) -> None:
        self.api = api
        self.on_submitted = on_submitted
    
    def submit(self, form: FeedbackForm) -> SubmissionResult:
        field_errors = form.field_errors()
        if field_errors:
            return SubmissionResult(success=False, field_errors=field_errors)
        
        try:
            record = self.api.submit_feedback(form.to_payload())
        except FeedbackApiError as e:
            logger.error(f"Error submitting feedback: {e}")
            # Ошибки валидации сервера показываем как есть
            message = ", ".join(e.errors) if e.errors else SUBMIT_FAILED_MESSAGE
            return SubmissionResult(success=False, error=message)
        
        logger.info(f"Feedback submitted: {record.get('id')}")
        if self.on_submitted:
            self.on_submitted()
        
        return SubmissionResult(success=True, record=record)
