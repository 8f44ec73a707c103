from typing import Callable

from feedback_portal.feedback.schemas import DEFAULT_SORT, format_category_name
from feedback_portal.logging_config import get_logger
from .api import FeedbackApiClient, FeedbackApiError

logger = get_logger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch feedback. Please try again later."

ROWS_PER_PAGE_OPTIONS = (5, 10, 25)

SORT_OPTIONS: dict[str, str] = {
    "timestamp:desc": "Newest First",
    "timestamp:asc": "Oldest First",
    "name:asc": "Name (A-Z)",
    "name:desc": "Name (Z-A)",
    "category:asc": "Category (A-Z)",
    "category:desc": "Category (Z-A)",
}

SEARCH_FIELDS = ("name", "email", "feedback", "category")


def matches_search(item: dict, query: str) -> bool:
    """Регистронезависимый поиск подстроки по имени, email, тексту и категории."""
    query = query.lower()
    return any(query in str(item.get(field) or "").lower() for field in SEARCH_FIELDS)


class FeedbackDashboard:
    """
    Состояние таблицы отзывов.
    
    Держит полную выборку с сервера и производный отфильтрованный список.
    Фильтр по категории и поиск работают по уже загруженным данным (AND),
    смена сортировки перезапрашивает сервер. Пагинация клиентская.
    """
    
    def __init__(
        self,
        api: FeedbackApiClient,
        on_data_fetched: Callable[[list[dict]], None] | None = None,
        rows_per_page: int = ROWS_PER_PAGE_OPTIONS[0]
    ) -> None:
        self.api = api
        self.on_data_fetched = on_data_fetched
        self.feedback_list: list[dict] = []
        self.filtered_list: list[dict] = []
        self.loading = False
        self.error: str | None = None
        self.filter_category = ""
        self.sort_by = DEFAULT_SORT.to_param()
        self.search_query = ""
        self.page = 0
        self.rows_per_page = rows_per_page
        self.refresh_trigger = 0
    
    def fetch(self) -> None:
        """Загрузить отзывы с текущими фильтром и сортировкой."""
        self.loading = True
        self.error = None
        try:
            data = self.api.list_feedback(
                category=self.filter_category or None,
                sort_by=self.sort_by or None
            )
        except FeedbackApiError as e:
            logger.error(f"Error fetching feedback: {e}")
            self.error = FETCH_FAILED_MESSAGE
            self.feedback_list = []
            self.filtered_list = []
            if self.on_data_fetched:
                self.on_data_fetched([])
            return
        finally:
            self.loading = False
        
        if self.refresh_trigger and self.page != 0:
            self.page = 0
        
        self.feedback_list = data
        self.apply_filters()
        if self.on_data_fetched:
            self.on_data_fetched(data)
    
    def refresh(self, trigger: int | None = None) -> None:
        """Перезагрузка по сигналу (новый отзыв или кнопка обновления)."""
        if trigger is not None:
            self.refresh_trigger = trigger
        self.fetch()
    
    def apply_filters(self) -> list[dict]:
        result = list(self.feedback_list)
        
        if self.filter_category:
            result = [item for item in result if item.get("category") == self.filter_category]
        
        if self.search_query:
            result = [item for item in result if matches_search(item, self.search_query)]
        
        self.filtered_list = result
        return result
    
    def set_filter_category(self, category: str | None) -> None:
        self.filter_category = category or ""
        self.apply_filters()
    
    def set_search_query(self, query: str | None) -> None:
        self.search_query = query or ""
        self.apply_filters()
    
    def set_sort_by(self, sort_by: str) -> None:
        """Смена сортировки: сервер отдаёт выборку в новом порядке."""
        self.sort_by = sort_by
        self.fetch()
    
    def set_page(self, page: int) -> None:
        self.page = max(0, page)
    
    def set_rows_per_page(self, rows_per_page: int) -> None:
        self.rows_per_page = rows_per_page
        self.page = 0
    
    @property
    def page_count(self) -> int:
        if self.rows_per_page <= 0:
            return 1
        return max(1, -(-len(self.filtered_list) // self.rows_per_page))
    
    def page_rows(self) -> list[dict]:
        if self.rows_per_page <= 0:
            return list(self.filtered_list)
        start = self.page * self.rows_per_page
        return self.filtered_list[start:start + self.rows_per_page]
    
    @property
    def empty_rows(self) -> int:
        """Пустые строки на неполной странице (кроме первой)."""
        if self.page == 0:
            return 0
        return max(0, (1 + self.page) * self.rows_per_page - len(self.filtered_list))
    
    @property
    def total_results(self) -> int:
        return len(self.filtered_list)
    
    @property
    def active_filter_label(self) -> str:
        return format_category_name(self.filter_category) if self.filter_category else "None"
    
    @property
    def sort_label(self) -> str:
        field, _, direction = self.sort_by.partition(":")
        if field == "timestamp":
            return "Newest First" if direction == "desc" else "Oldest First"
        return field[:1].upper() + field[1:]
