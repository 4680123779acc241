from typing import Optional
from enum import Enum

from life_ledger.models.common import WireModel


class StatsType(str, Enum):
    KPI = "kpi"
    TRENDS = "trends"
    ANALYTICS = "analytics"
    RECURRING = "recurring"


class KPIStat(WireModel):
    label: str
    value: str
    trend: str
    is_positive: bool
    icon: Optional[str] = None


class MonthlyTrend(WireModel):
    name: str
    income: float
    expense: float
    savings: float


class ExpenseBucket(WireModel):
    date: str
    amount: float
    display_date: str
