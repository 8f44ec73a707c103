#!/usr/bin/env python3
"""
Запуск Feedback Portal API через uvicorn.
"""
import sys

import uvicorn

from feedback_portal.config import get_settings
from feedback_portal.logging_config import get_logger

logger = get_logger(__name__)


def main():
    settings = get_settings()
    
    logger.info(f"Starting Feedback Portal API on {settings.host}:{settings.port}")
    
    try:
        uvicorn.run(
            "feedback_portal.main:app",
            host=settings.host,
            port=settings.port,
            reload=settings.debug,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
