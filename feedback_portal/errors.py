from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from feedback_portal.logging_config import get_logger

logger = get_logger(__name__)

SERVER_ERROR_MESSAGE = "Server Error"

# Ошибки, сообщения которых уже сформулированы для пользователя
MESSAGE_ERROR_TYPES = {"required", "email_invalid", "category_invalid"}


def error_response(status_code: int, error: str | list[str]) -> JSONResponse:
    """Ответ в общем конверте {success: false, error}."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error}
    )


def server_error_response() -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)


def validation_messages(errors: list[dict]) -> list[str]:
    """
    Превратить ошибки pydantic в список читаемых сообщений.
    
    Args:
        errors: exc.errors() из RequestValidationError
    
    Returns:
        Сообщения в порядке полей модели
    """
    messages: list[str] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        msg = err.get("msg", "Invalid value")
        if err.get("type") in MESSAGE_ERROR_TYPES:
            messages.append(msg)
        elif err.get("type") == "json_invalid":
            messages.append("Request body must be valid JSON")
        elif not loc:
            messages.append("Request body must be a JSON object")
        else:
            messages.append(f"{'.'.join(loc)}: {msg}")
    return messages


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Обработчик ошибок валидации запроса (400 со списком сообщений)."""
    messages = validation_messages(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {messages}")
    return error_response(status.HTTP_400_BAD_REQUEST, messages)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Последний рубеж: логируем с трейсбеком, наружу отдаём общий ответ."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return server_error_response()
