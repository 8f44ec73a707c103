import pandas as pd
from pydantic import BaseModel

from feedback_portal.feedback.schemas import format_category_name

NO_DATA_LABEL = "N/A"


class CategoryStat(BaseModel):
    category: str
    label: str
    count: int
    percentage: float

    @property
    def percentage_label(self) -> str:
        return f"{self.percentage:.1f}%"


class FeedbackAnalysis(BaseModel):
    total: int = 0
    categories: list[CategoryStat] = []
    most_common: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def most_common_label(self) -> str:
        if self.most_common is None:
            return NO_DATA_LABEL
        return format_category_name(self.most_common)

    def to_dataframe(self) -> pd.DataFrame:
        """Таблица для графиков: категория, количество, доля."""
        return pd.DataFrame(
            [
                {"Category": c.label, "Count": c.count, "Percentage": round(c.percentage, 1)}
                for c in self.categories
            ],
            columns=["Category", "Count", "Percentage"],
        )


def analyze_feedback(records: list[dict]) -> FeedbackAnalysis:
    """
    Сгруппировать отзывы по категории.
    
    Категории идут в порядке первого появления; при равенстве
    самой частой считается та, что встретилась раньше.
    """
    counts: dict[str, int] = {}
    for item in records:
        category = item.get("category") or "other"
        counts[category] = counts.get(category, 0) + 1
    
    total = sum(counts.values())
    if not total:
        return FeedbackAnalysis()
    
    categories = [
        CategoryStat(
            category=category,
            label=format_category_name(category),
            count=count,
            percentage=count / total * 100,
        )
        for category, count in counts.items()
    ]
    
    top = categories[0]
    for stat in categories[1:]:
        if stat.count > top.count:
            top = stat
    
    return FeedbackAnalysis(total=total, categories=categories, most_common=top.category)
