from .api import FeedbackApiClient, FeedbackApiError
from .analysis import FeedbackAnalysis, CategoryStat, analyze_feedback
from .dashboard import FeedbackDashboard, SORT_OPTIONS, ROWS_PER_PAGE_OPTIONS
from .submission import FeedbackForm, SubmissionClient, SubmissionResult

__all__ = [
    "FeedbackApiClient",
    "FeedbackApiError",
    "FeedbackAnalysis",
    "CategoryStat",
    "analyze_feedback",
    "FeedbackDashboard",
    "SORT_OPTIONS",
    "ROWS_PER_PAGE_OPTIONS",
    "FeedbackForm",
    "SubmissionClient",
    "SubmissionResult",
]
