"""
Pydantic schemas for paginated responses.
"""
from pydantic import BaseModel
from typing import List
from app.schemas.trip import TripResponse


class Pagination(BaseModel):
    """Pagination metadata for a list response."""
    current_page: int
    total_pages: int
    total_items: int
    limit: int
    has_next_page: bool
    has_previous_page: bool


class TripList(BaseModel):
    """A page of trips with its pagination metadata."""
    items: List[TripResponse]
    pagination: Pagination
