from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from feedback_portal.config import get_settings
from feedback_portal.logging_config import setup_logging, get_logger
from feedback_portal.errors import validation_exception_handler, unhandled_exception_handler
from feedback_portal.feedback import feedback_router
from feedback_portal.db import supabase_client
from feedback_portal.cache import close_redis

settings = get_settings()

setup_logging(
    level="DEBUG" if settings.debug else settings.log_level,
    json_format=settings.log_json,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Feedback Portal API",
    description="Customer feedback collection API",
    version="1.0.0",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(feedback_router)


@app.on_event("shutdown")
async def _shutdown_clients():
    await supabase_client.close()
    await close_redis()


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/")
async def root():
    return {
        "app": "Feedback Portal API",
        "version": "1.0.0",
        "docs": "/docs"
    }
