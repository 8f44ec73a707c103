"""
Кэш выборок отзывов в Redis.

Кэш необязателен: без REDIS_URL или при недоступном Redis все функции
молча превращаются в промах, и запросы идут прямо в хранилище.
"""
import json
from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError

from feedback_portal.config import get_settings
from feedback_portal.logging_config import get_logger

logger = get_logger(__name__)

KEY_PREFIX = "feedback_portal"

_redis_pool: ConnectionPool | None = None
_redis_client: Redis | None = None


async def get_redis() -> Redis | None:
    """Redis клиент или None, если кэш выключен/недоступен."""
    global _redis_pool, _redis_client

    redis_url = get_settings().redis_url
    if not redis_url:
        return None

    if _redis_client is not None:
        try:
            await _redis_client.ping()
            return _redis_client
        except RedisError:
            _redis_client = None
            _redis_pool = None

    try:
        _redis_pool = ConnectionPool.from_url(redis_url, max_connections=10, decode_responses=True)
        _redis_client = Redis(connection_pool=_redis_pool)
        await _redis_client.ping()
        logger.info("Redis connection established")
    except RedisError as e:
        logger.warning(f"Redis unavailable, listing cache disabled: {e}")
        _redis_client = None
        _redis_pool = None

    return _redis_client


async def close_redis() -> None:
    global _redis_client, _redis_pool

    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None

    if _redis_pool:
        await _redis_pool.disconnect()
        _redis_pool = None
        logger.info("Redis connection closed")


def make_cache_key(*args: str) -> str:
    return ":".join([KEY_PREFIX, *(str(arg) for arg in args)])


GENERATION_KEY = make_cache_key("feedback", "generation")


def feedback_list_key(generation: int, category: str | None, order: str) -> str:
    """Ключ выборки по паре (категория, сортировка) внутри поколения."""
    return make_cache_key("feedback", "list", generation, category or "all", order)


async def get_listing_generation() -> int:
    """
    Текущее поколение выборок. Читать до запроса к хранилищу:
    если во время запроса создан отзыв, устаревшая выборка запишется
    под ключ старого поколения, который уже никто не читает.
    """
    redis = await get_redis()
    if not redis:
        return 0

    try:
        value = await redis.get(GENERATION_KEY)
    except RedisError as e:
        logger.warning(f"Cache generation read failed: {e}")
        return 0

    try:
        return int(value) if value else 0
    except ValueError:
        logger.warning(f"Ignoring malformed cache generation {value!r}")
        return 0


async def cache_get(key: str) -> list | dict | None:
    redis = await get_redis()
    if not redis:
        return None

    try:
        value = await redis.get(key)
    except RedisError as e:
        logger.warning(f"Cache read failed for {key}: {e}")
        return None

    if value is None:
        return None

    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning(f"Dropping unreadable cache entry {key}")
        return None


async def cache_set(key: str, value: list | dict, ttl: int) -> bool:
    """Записать значение с TTL (секунды). False, если кэш недоступен."""
    redis = await get_redis()
    if not redis:
        return False

    try:
        await redis.setex(key, ttl, json.dumps(value, default=str))
    except (RedisError, TypeError) as e:
        logger.warning(f"Cache write failed for {key}: {e}")
        return False
    return True


async def invalidate_feedback_cache() -> int:
    """
    Сделать недоступными все закэшированные выборки отзывов.

    Ключи прошлых поколений не удаляются, их добирает TTL.

    Returns:
        Новое поколение (0, если кэш недоступен)
    """
    redis = await get_redis()
    if not redis:
        return 0

    try:
        generation = await redis.incr(GENERATION_KEY)
    except RedisError as e:
        logger.warning(f"Cache invalidation failed: {e}")
        return 0

    logger.debug(f"Feedback listings moved to cache generation {generation}")
    return generation
