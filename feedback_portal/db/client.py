import httpx

from feedback_portal.config import get_settings
from feedback_portal.logging_config import get_logger

logger = get_logger(__name__)
settings = get_settings()

SUPABASE_API = f"{settings.supabase_url.rstrip('/')}/rest/v1"

TIMEOUT_CONFIG = httpx.Timeout(
    connect=10.0,
    read=15.0,
    write=10.0,
    pool=15.0
)

LIMITS_CONFIG = httpx.Limits(
    max_keepalive_connections=20,
    max_connections=100,
    keepalive_expiry=30.0
)


def get_supabase_headers() -> dict[str, str]:
    return {
        "apikey": settings.supabase_key,
        "Authorization": f"Bearer {settings.supabase_key}",
        "Content-Type": "application/json",
        "Prefer": "return=representation"
    }


class SupabaseClient:
    """
    Доступ к коллекции отзывов через PostgREST.
    Один HTTP-пул на процесс; ошибки логируются и пробрасываются вызывающему.
    """

    def __init__(
        self,
        api_url: str = SUPABASE_API,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.api_url = api_url
        self.headers = get_supabase_headers()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=TIMEOUT_CONFIG,
                limits=LIMITS_CONFIG,
                http2=True,
                transport=self._transport
            )
            logger.debug("Created new HTTP client for Supabase")
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.info("Supabase HTTP client closed")

    async def _send(self, method: str, table: str, **kwargs) -> list[dict]:
        client = await self._get_client()
        try:
            resp = await client.request(
                method,
                f"{self.api_url}/{table}",
                headers=self.headers,
                **kwargs
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Supabase {method} {table}: {e.response.status_code} - {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Supabase {method} {table} request error: {e}")
            raise
        return resp.json()

    async def get(
        self,
        table: str,
        params: dict[str, str] | None = None
    ) -> list[dict]:
        """
        Выборка из таблицы.

        Args:
            table: Имя таблицы
            params: Параметры PostgREST, например {"category": "eq.other", "order": "name.asc"}
        """
        return await self._send("GET", table, params=params or {})

    async def insert(
        self,
        table: str,
        data: dict | list[dict]
    ) -> list[dict]:
        """Вставить записи, вернуть их в сохранённом виде (с id от хранилища)."""
        payload = data if isinstance(data, list) else [data]
        return await self._send("POST", table, json=payload)


supabase_client = SupabaseClient()
