"""
Financial reporting schemas.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class DateRangePeriod(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None


class FinancialSummary(BaseModel):
    """Income and expense totals for a property over a period"""

    property_id: str
    property_name: str = ""
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_cashflow: Decimal = Decimal("0")
    date_range: DateRangePeriod = Field(default_factory=DateRangePeriod)
    income_by_category: dict[str, Decimal] = Field(default_factory=dict)
    expenses_by_category: dict[str, Decimal] = Field(default_factory=dict)
