import httpx

from feedback_portal.config import get_settings
from feedback_portal.logging_config import get_logger

logger = get_logger(__name__)


class FeedbackApiError(Exception):
    """Неуспешный вызов API отзывов (сеть, 4xx, 5xx)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[str] | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []

    @property
    def is_validation_error(self) -> bool:
        return self.status_code == 400 and bool(self.errors)


def _error_from_response(response: httpx.Response) -> FeedbackApiError:
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        error = None
    
    if isinstance(error, list):
        errors = [str(e) for e in error]
    elif error:
        errors = [str(error)]
    else:
        errors = []
    
    message = ", ".join(errors) or f"HTTP {response.status_code}"
    return FeedbackApiError(message, status_code=response.status_code, errors=errors)


class FeedbackApiClient:
    """
    Синхронный клиент API отзывов для дашборда и формы.
    Повторов нет: любая ошибка сразу превращается в FeedbackApiError.
    """
    
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self._transport = transport
        self._client: httpx.Client | None = None
    
    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport
            )
        return self._client
    
    def _request(self, method: str, path: str, **kwargs) -> dict:
        client = self._get_client()
        try:
            resp = client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Feedback API {method} {path} failed: {e}")
            raise FeedbackApiError(str(e)) from e
        
        if resp.is_error:
            error = _error_from_response(resp)
            logger.error(f"Feedback API {method} {path} returned {resp.status_code}: {error}")
            raise error
        
        try:
            return resp.json()
        except ValueError as e:
            raise FeedbackApiError("Malformed response", status_code=resp.status_code) from e
    
    def list_feedback(
        self,
        category: str | None = None,
        sort_by: str | None = None
    ) -> list[dict]:
        """
        Получить отзывы.
        
        Args:
            category: Точное совпадение категории (пусто = все)
            sort_by: Сортировка "field:direction"
        
        Returns:
            Список записей в порядке сервера
        """
        params = {}
        if category:
            params["category"] = category
        if sort_by:
            params["sortBy"] = sort_by
        
        body = self._request("GET", "/feedback", params=params)
        return body.get("data", [])
    
    def submit_feedback(self, payload: dict) -> dict:
        """Отправить отзыв, вернуть сохранённую запись."""
        body = self._request("POST", "/feedback", json=payload)
        return body.get("data", {})
