from .router import router as feedback_router

__all__ = ["feedback_router"]
