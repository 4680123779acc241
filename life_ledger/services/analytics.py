"""
Derived views over raw entity lists.

Everything here is a pure function of its arguments: no store access and no
clock reads (callers pass ``today``), so the same code backs the ``/api/stats``
endpoint and the client-side dashboard.
"""
import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from life_ledger.models.budget import BudgetResponse, CategoryStat
from life_ledger.models.habit import DailyHabitStat, HabitKPIs, HabitLogResponse, HabitResponse
from life_ledger.models.installment import InstallmentProgress, InstallmentResponse, InstallmentSummary
from life_ledger.models.stats import ExpenseBucket, KPIStat, MonthlyTrend
from life_ledger.models.task import AdvancedTaskFilter, TaskOverview, TaskPriority, TaskResponse
from life_ledger.models.transaction import TransactionResponse, TransactionType

TIME_RANGES = ("week", "month", "year")
BASIC_TASK_FILTERS = ("all", "high", "active", "completed")
TASK_TIME_WINDOWS = ("all", "today", "week", "month")


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _totals(transactions: Iterable[TransactionResponse]) -> Dict[str, float]:
    totals = {TransactionType.INCOME: 0.0, TransactionType.EXPENSE: 0.0}
    for t in transactions:
        totals[t.type] += abs(t.amount)
    return totals


# ===== BUDGETS =====

def category_stats(transactions: Iterable[TransactionResponse],
                   budgets: Iterable[BudgetResponse]) -> List[CategoryStat]:
    """Join every budget with the expense total of its category."""
    spent_by_category: Dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            spent_by_category[t.category] += abs(t.amount)

    stats = []
    for budget in budgets:
        spent = round(spent_by_category.get(budget.category, 0.0), 2)
        # A zero limit has no meaningful usage ratio
        percent = spent / budget.limit * 100 if budget.limit > 0 else 0.0
        stats.append(CategoryStat(
            category=budget.category,
            limit=budget.limit,
            color=budget.color,
            spent=spent,
            remaining=round(budget.limit - spent, 2),
            percent=percent,
            is_over_budget=budget.limit > 0 and spent > budget.limit,
        ))
    return stats


def budget_totals(stats: Iterable[CategoryStat]) -> Dict[str, float]:
    total_limit = 0.0
    total_spent = 0.0
    for stat in stats:
        total_limit += stat.limit
        total_spent += stat.spent
    return {"totalLimit": round(total_limit, 2), "totalSpent": round(total_spent, 2)}


# ===== EXPENSE BUCKETS =====

def _bucket_range(time_range: str, today: date) -> List[date]:
    if time_range == "week":
        start = today - timedelta(days=today.weekday())
        days = 7
    elif time_range == "month":
        start = today.replace(day=1)
        days = calendar.monthrange(today.year, today.month)[1]
    elif time_range == "year":
        start = date(today.year, 1, 1)
        days = 366 if calendar.isleap(today.year) else 365
    else:
        raise ValueError(f"Unknown time range '{time_range}'. Expected one of {', '.join(TIME_RANGES)}")
    return [start + timedelta(days=offset) for offset in range(days)]


def _display_date(day: date, time_range: str) -> str:
    if time_range == "week":
        return day.strftime("%a")
    if time_range == "month":
        return str(day.day)
    return f"{day.strftime('%b')} {day.day}"


def daily_expense_buckets(transactions: Iterable[TransactionResponse], time_range: str,
                          today: date) -> List[ExpenseBucket]:
    """
    One bucket per calendar day of the week (Monday start), month or year
    containing ``today``, holding that day's summed expenses.
    """
    days = _bucket_range(time_range, today)
    expenses: Dict[date, float] = defaultdict(float)
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            expenses[t.date] += abs(t.amount)

    return [
        ExpenseBucket(
            date=day.isoformat(),
            amount=round(expenses.get(day, 0.0), 2),
            display_date=_display_date(day, time_range),
        )
        for day in days
    ]


# ===== HABITS =====

def habit_is_active(habit: HabitResponse, day: date) -> bool:
    """Active from ``activeFromDate`` (else ``startDate``) until the day it was archived."""
    first_day = habit.active_from_date or habit.start_date
    if day < first_day:
        return False
    if habit.archived_at is not None and day >= habit.archived_at.date():
        return False
    return True


def habit_logs_map(logs: Iterable[HabitLogResponse]) -> Dict[int, Dict[str, float]]:
    """habitId -> ISO date -> logged value"""
    logs_map: Dict[int, Dict[str, float]] = defaultdict(dict)
    for log in logs:
        logs_map[log.habit_id][log.date.isoformat()] = log.completed_value
    return dict(logs_map)


def habit_daily_stats(habits: Sequence[HabitResponse], logs: Iterable[HabitLogResponse],
                      start: date, end: date) -> List[DailyHabitStat]:
    """Per day in [start, end]: active habits and how many reached their goal."""
    logs_map = habit_logs_map(logs)
    stats = []
    day = start
    while day <= end:
        active = [h for h in habits if habit_is_active(h, day)]
        completed = sum(
            1 for h in active
            if logs_map.get(h.id, {}).get(day.isoformat(), 0) >= h.goal_target
        )
        percentage = completed / len(active) * 100 if active else 0.0
        stats.append(DailyHabitStat(
            date=day,
            total_habits=len(active),
            completed_habits=completed,
            percentage=round(percentage, 1),
        ))
        day += timedelta(days=1)
    return stats


def habit_kpis(daily_stats: Sequence[DailyHabitStat], logs_map: Dict[int, Dict[str, float]],
               habits: Sequence[HabitResponse]) -> HabitKPIs:
    completion_rate = 0.0
    if daily_stats:
        completion_rate = round(sum(s.percentage for s in daily_stats) / len(daily_stats), 1)

    best_day: Optional[date] = None
    best_percentage = 0.0
    for stat in daily_stats:
        if stat.percentage > best_percentage:
            best_day, best_percentage = stat.date, stat.percentage

    total_completions = 0
    top_habit_id, top_count = None, -1
    for habit_id, by_date in logs_map.items():
        count = sum(1 for value in by_date.values() if value > 0)
        total_completions += count
        if count > top_count:
            top_habit_id, top_count = habit_id, count

    titles = {h.id: h.title for h in habits}
    return HabitKPIs(
        completion_rate=completion_rate,
        best_day=best_day,
        total_completions=total_completions,
        most_consistent_habit=titles.get(top_habit_id),
    )


# ===== TASKS =====

def _in_time_window(due: Optional[date], window: str, today: date) -> bool:
    if window == "all":
        return True
    if due is None:
        return False
    if window == "today":
        return due == today
    if window == "week":
        # Sunday through Saturday
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return week_start <= due <= week_start + timedelta(days=6)
    if window == "month":
        return (due.year, due.month) == (today.year, today.month)
    raise ValueError(f"Unknown time window '{window}'")


def _matches_advanced(task: TaskResponse, advanced: AdvancedTaskFilter) -> bool:
    if advanced.priorities and task.priority not in advanced.priorities:
        return False
    if advanced.statuses and task.status not in advanced.statuses:
        return False
    if advanced.categories and task.category not in advanced.categories:
        return False
    if advanced.start_date or advanced.end_date:
        if task.due_date is None:
            return False
        if advanced.start_date and task.due_date < advanced.start_date:
            return False
        if advanced.end_date and task.due_date > advanced.end_date:
            return False
    return True


def _matches_basic(task: TaskResponse, basic: str) -> bool:
    if basic == "high":
        return task.priority == TaskPriority.HIGH
    if basic == "active":
        return not task.completed
    if basic == "completed":
        return task.completed
    if basic == "all":
        return True
    raise ValueError(f"Unknown task filter '{basic}'")


def sort_tasks(tasks: Iterable[TaskResponse]) -> List[TaskResponse]:
    """Incomplete tasks first, newest first within each group."""
    return sorted(tasks, key=lambda t: (t.completed, -t.id))


def filter_tasks(tasks: Iterable[TaskResponse], basic: str = "all", time_window: str = "all",
                 advanced: Optional[AdvancedTaskFilter] = None,
                 today: Optional[date] = None) -> List[TaskResponse]:
    """
    Apply either the advanced filter (when any of its fields is set) or the
    basic filter combined with the time window, then sort.
    """
    today = today or date.today()
    if advanced is not None and advanced.is_active:
        selected = [t for t in tasks if _matches_advanced(t, advanced)]
    else:
        selected = [
            t for t in tasks
            if _matches_basic(t, basic) and _in_time_window(t.due_date, time_window, today)
        ]
    return sort_tasks(selected)


def task_overview(tasks: Sequence[TaskResponse]) -> TaskOverview:
    return TaskOverview(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.completed),
        high_priority_pending=sum(1 for t in tasks if not t.completed and t.priority == TaskPriority.HIGH),
    )


# ===== INSTALLMENTS =====

def installment_summary(installments: Iterable[InstallmentResponse]) -> InstallmentSummary:
    total_debt = 0.0
    monthly_commitment = 0.0
    plans = []
    for plan in installments:
        monthly_payment = plan.total_amount / plan.total_months
        total_debt += plan.total_amount - plan.paid_amount
        monthly_commitment += monthly_payment
        plans.append(InstallmentProgress(
            id=plan.id,
            name=plan.name,
            progress=round(plan.paid_amount / plan.total_amount * 100, 1) if plan.total_amount else 0.0,
            monthly_payment=round(monthly_payment, 2),
            remaining_amount=round(plan.total_amount - plan.paid_amount, 2),
            remaining_months=max(plan.total_months - plan.paid_months, 0),
        ))
    return InstallmentSummary(
        total_debt=round(total_debt, 2),
        monthly_commitment=round(monthly_commitment, 2),
        plans=plans,
    )


# ===== DASHBOARD STATS =====

def kpi_stats(transactions: Sequence[TransactionResponse],
              installments: Sequence[InstallmentResponse]) -> List[KPIStat]:
    totals = _totals(transactions)
    income = totals[TransactionType.INCOME]
    expense = totals[TransactionType.EXPENSE]
    return [
        KPIStat(label="Net Savings", value=_money(income - expense), trend="+1.2%", is_positive=True),
        KPIStat(label="Monthly Income", value=_money(income), trend="+12%", is_positive=True),
        KPIStat(label="Monthly Expenses", value=_money(expense), trend="-5%", is_positive=True),
        KPIStat(label="Active Installments", value=str(len(installments)), trend="Plans", is_positive=True),
    ]


def monthly_trends(transactions: Iterable[TransactionResponse], today: date) -> List[MonthlyTrend]:
    """Income, expense and savings per month from January through the current month."""
    by_month = {month: {"income": 0.0, "expense": 0.0} for month in range(1, today.month + 1)}
    for t in transactions:
        if t.date.year != today.year or t.date.month not in by_month:
            continue
        by_month[t.date.month][t.type.value] += abs(t.amount)

    return [
        MonthlyTrend(
            name=calendar.month_abbr[month],
            income=round(values["income"], 2),
            expense=round(values["expense"], 2),
            savings=round(values["income"] - values["expense"], 2),
        )
        for month, values in by_month.items()
    ]


def analytics_stats(transactions: Sequence[TransactionResponse]) -> List[KPIStat]:
    totals = _totals(transactions)
    income = totals[TransactionType.INCOME]
    expense = totals[TransactionType.EXPENSE]
    savings_rate = (income - expense) / income * 100 if income > 0 else 0.0
    net_cash_flow = income - expense
    avg_daily_spend = expense / 30 if transactions else 0.0

    return [
        KPIStat(label="Savings Rate", value=f"{savings_rate:.1f}%", trend="+4.2% from last month",
                is_positive=True, icon="Percent"),
        KPIStat(label="Net Cash Flow", value=f"{'+' if net_cash_flow >= 0 else ''}{_money(net_cash_flow)}",
                trend="Income - Expenses", is_positive=net_cash_flow >= 0, icon="DollarSign"),
        KPIStat(label="Avg. Daily Spend", value=_money(avg_daily_spend), trend="+$12.00 vs average",
                is_positive=False, icon="Calendar"),
    ]
