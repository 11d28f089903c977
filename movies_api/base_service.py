"""
Base utilities for Movies API services.

This module provides common functionality for all services:
- Logging configuration
- Structured event and error logging
- Standard response envelope for service endpoints
"""
import os
import logging
import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Union


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from LOG_LEVEL."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


class BaseService:
    """Base service with common functionality."""

    def __init__(self, service_name: str = "core"):
        """Initialize base service."""
        self.service_name = service_name
        self.logger = logging.getLogger(f"movies_api.{service_name}")

    def log_event(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Log an event."""
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "service": self.service_name,
            "event": event_name,
            "data": data or {},
        }
        self.logger.info(f"EVENT: {json.dumps(log_data, default=str)}")
        return log_data

    def log_error(self, error: Exception, context: Optional[str] = None) -> Dict[str, Any]:
        """Log an error with optional context."""
        error_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "service": self.service_name,
            "error": str(error),
            "error_type": error.__class__.__name__,
            "context": context or "unknown",
        }
        self.logger.error(f"ERROR: {json.dumps(error_data)}")
        return error_data

    def service_response(
        self,
        message: str = "ok",
        status: str = "ok",
        data: Optional[Union[Dict, List, str, int, bool]] = None
    ) -> Dict[str, Any]:
        """Format a standard service response."""
        response = {
            "message": message,
            "status": status,
            "timestamp": datetime.utcnow().isoformat()
        }

        if data is not None:
            response["data"] = data

        return response
