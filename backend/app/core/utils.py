"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import math


def utc_timestamp() -> str:
    """Current UTC time in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def format_response(data: Any = None, message: str = "Success", **extra: Any) -> Dict[str, Any]:
    """Format API response."""
    response = {
        "success": True,
        "message": message,
    }
    if data is not None:
        response["data"] = data
    response.update(extra)
    response["timestamp"] = utc_timestamp()
    return response


def format_error(message: str, code: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {
        "success": False,
        "code": code,
        "message": message,
    }
    if details:
        response["details"] = details
    response["timestamp"] = utc_timestamp()
    return response


def build_pagination(page: int, limit: int, total_items: int) -> Dict[str, Any]:
    """
    Build pagination metadata for a page request.

    The requested page is clamped to the last existing page, and an empty
    result still reports one page.
    """
    total_pages = max(math.ceil(total_items / limit), 1)
    current_page = min(max(page, 1), total_pages)
    return {
        "current_page": current_page,
        "total_pages": total_pages,
        "total_items": total_items,
        "limit": limit,
        "has_next_page": current_page < total_pages,
        "has_previous_page": current_page > 1,
    }


def clamp(value: int, lower: int, upper: int) -> int:
    return min(max(value, lower), upper)


def sanitize_string(value: Optional[str], max_length: int = 100) -> Optional[str]:
    """Trim and cap a free-text value; blank values become None."""
    if value is None:
        return None
    value = value.strip()[:max_length]
    return value or None
