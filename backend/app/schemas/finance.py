"""
Pydantic schemas for the monthly finance summary.
"""
from pydantic import BaseModel
from typing import List
from app.schemas.types import Money


class CurrencySummary(BaseModel):
    """Income, expense and profit of one currency within a month."""
    currency: str
    income: Money
    expense: Money
    profit: Money


class MonthSummary(BaseModel):
    """All currency summaries of one month."""
    month: str
    month_number: int
    summary: List[CurrencySummary] = []
