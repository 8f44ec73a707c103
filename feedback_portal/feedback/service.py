from datetime import datetime, timezone

from feedback_portal.db import supabase_client
from feedback_portal.config import get_settings
from feedback_portal.logging_config import get_logger
from feedback_portal.cache import (
    cache_get,
    cache_set,
    feedback_list_key,
    get_listing_generation,
    invalidate_feedback_cache,
)
from .schemas import FeedbackCreate, SortSpec, DEFAULT_SORT, SORTABLE_FIELDS

logger = get_logger(__name__)
settings = get_settings()


def parse_sort(raw: str | None) -> SortSpec:
    """
    Разобрать строку сортировки вида "field:direction".
    
    Направление по умолчанию asc, всё кроме "desc" считается asc.
    Поле вне белого списка не попадает в запрос: используется сортировка
    по умолчанию (timestamp:desc).
    """
    if not raw:
        return DEFAULT_SORT
    
    field, _, direction = raw.partition(":")
    if field not in SORTABLE_FIELDS:
        logger.warning(f"Ignoring sort on unsupported field {field!r}")
        return DEFAULT_SORT
    
    return SortSpec(field=field, direction="desc" if direction == "desc" else "asc")


def build_list_params(category: str | None, sort: SortSpec) -> dict[str, str]:
    """Собрать параметры PostgREST для выборки отзывов."""
    params = {"order": sort.to_order()}
    if category:
        params["category"] = f"eq.{category}"
    return params


async def create_feedback(data: FeedbackCreate) -> dict | None:
    """Сохранить отзыв. id проставляет хранилище, timestamp ставим здесь."""
    payload = {
        "name": data.name,
        "email": data.email,
        "feedback": data.feedback,
        "category": data.category.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    
    result = await supabase_client.insert(settings.feedback_table, payload)
    
    if result:
        await invalidate_feedback_cache()
        logger.info(f"Feedback {result[0].get('id')} created ({data.category.value})")
    
    return result[0] if result else None


async def list_feedback(category: str | None = None, sort_by: str | None = None) -> list[dict]:
    """Получить все отзывы с фильтром по категории и сортировкой (с кэшированием)."""
    sort = parse_sort(sort_by)
    generation = await get_listing_generation()
    cache_key = feedback_list_key(generation, category, sort.to_order())
    
    cached = await cache_get(cache_key)
    if cached is not None:
        return cached
    
    records = await supabase_client.get(
        settings.feedback_table,
        build_list_params(category, sort)
    )
    
    await cache_set(cache_key, records, settings.list_cache_ttl)
    
    return records
