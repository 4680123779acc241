from datetime import date, datetime

import pytest

from life_ledger.models.budget import BudgetResponse
from life_ledger.models.habit import HabitLogResponse, HabitResponse
from life_ledger.models.installment import InstallmentResponse
from life_ledger.models.task import AdvancedTaskFilter, TaskResponse
from life_ledger.models.transaction import TransactionResponse
from life_ledger.services import analytics


def make_transaction(id, amount, day, type="expense", category="Food"):
    return TransactionResponse(id=id, name="Entry", category=category, date=day, amount=amount, type=type)


def make_task(id, **fields):
    return TaskResponse(id=id, title=f"Task {id}", **fields)


def make_habit(id, start, **fields):
    return HabitResponse(id=id, title=f"Habit {id}", start_date=start, **fields)


class TestCategoryStats:
    """Budgets joined with what was spent."""

    def test_spent_sums_expenses_of_the_category(self):
        transactions = [
            make_transaction(1, 40, date(2024, 1, 1)),
            make_transaction(2, 70, date(2024, 1, 2)),
            make_transaction(3, 500, date(2024, 1, 3), type="income"),
            make_transaction(4, 25, date(2024, 1, 4), category="Transport"),
        ]
        budgets = [BudgetResponse(category="Food", limit=100)]

        [stat] = analytics.category_stats(transactions, budgets)

        assert stat.spent == 110
        assert stat.remaining == -10
        assert stat.percent == pytest.approx(110)
        assert stat.is_over_budget is True

    def test_zero_limit_has_zero_percent(self):
        [stat] = analytics.category_stats([make_transaction(1, 10, date(2024, 1, 1))],
                                          [BudgetResponse(category="Food", limit=0)])

        assert stat.percent == 0
        assert stat.is_over_budget is False

    def test_budget_totals(self):
        stats = analytics.category_stats(
            [make_transaction(1, 30, date(2024, 1, 1))],
            [BudgetResponse(category="Food", limit=100), BudgetResponse(category="Housing", limit=900)],
        )

        assert analytics.budget_totals(stats) == {"totalLimit": 1000, "totalSpent": 30}


class TestDailyExpenseBuckets:
    """One bucket per calendar day of the selected range."""

    def test_leap_year_has_366_buckets(self):
        assert len(analytics.daily_expense_buckets([], "year", date(2024, 7, 1))) == 366
        assert len(analytics.daily_expense_buckets([], "year", date(2023, 7, 1))) == 365

    def test_month_follows_calendar(self):
        buckets = analytics.daily_expense_buckets([], "month", date(2024, 2, 10))

        assert len(buckets) == 29
        assert buckets[0].date == "2024-02-01"
        assert buckets[-1].display_date == "29"

    def test_week_starts_monday(self):
        buckets = analytics.daily_expense_buckets([], "week", date(2024, 5, 15))

        assert [b.date for b in buckets][0] == "2024-05-13"
        assert [b.display_date for b in buckets] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    def test_amounts_are_summed_per_day(self):
        transactions = [
            make_transaction(1, 10, date(2024, 5, 14)),
            make_transaction(2, 5.5, date(2024, 5, 14)),
            make_transaction(3, 99, date(2024, 5, 14), type="income"),
            make_transaction(4, 7, date(2024, 4, 1)),
        ]

        buckets = analytics.daily_expense_buckets(transactions, "week", date(2024, 5, 15))

        assert {b.date: b.amount for b in buckets if b.amount} == {"2024-05-14": 15.5}

    def test_year_display_date(self):
        buckets = analytics.daily_expense_buckets([], "year", date(2024, 3, 3))

        assert buckets[0].display_date == "Jan 1"

    def test_unknown_range(self):
        with pytest.raises(ValueError):
            analytics.daily_expense_buckets([], "decade", date(2024, 1, 1))


class TestHabitStats:
    """Habit activity and completion figures."""

    def test_active_from_start_date(self):
        habit = make_habit(1, date(2024, 1, 10))

        assert analytics.habit_is_active(habit, date(2024, 1, 9)) is False
        assert analytics.habit_is_active(habit, date(2024, 1, 10)) is True

    def test_active_from_date_overrides_start(self):
        habit = make_habit(1, date(2024, 1, 1), active_from_date=date(2024, 1, 5))

        assert analytics.habit_is_active(habit, date(2024, 1, 4)) is False
        assert analytics.habit_is_active(habit, date(2024, 1, 5)) is True

    def test_inactive_from_archive_day(self):
        habit = make_habit(1, date(2024, 1, 1), archived_at=datetime(2024, 1, 20, 8, 30))

        assert analytics.habit_is_active(habit, date(2024, 1, 19)) is True
        assert analytics.habit_is_active(habit, date(2024, 1, 20)) is False

    def test_daily_stats_use_goal_target(self):
        habits = [make_habit(1, date(2024, 1, 1), goal_target=3), make_habit(2, date(2024, 1, 1))]
        logs = [
            HabitLogResponse(id=1, habit_id=1, date=date(2024, 1, 1), completed_value=2),
            HabitLogResponse(id=2, habit_id=2, date=date(2024, 1, 1), completed_value=1),
            HabitLogResponse(id=3, habit_id=1, date=date(2024, 1, 2), completed_value=3),
        ]

        stats = analytics.habit_daily_stats(habits, logs, date(2024, 1, 1), date(2024, 1, 3))

        assert [(s.completed_habits, s.percentage) for s in stats] == [(1, 50.0), (1, 50.0), (0, 0.0)]

    def test_percentage_is_rounded(self):
        habits = [make_habit(i, date(2024, 1, 1)) for i in (1, 2, 3)]
        logs = [HabitLogResponse(id=1, habit_id=1, date=date(2024, 1, 1), completed_value=1)]

        [stat] = analytics.habit_daily_stats(habits, logs, date(2024, 1, 1), date(2024, 1, 1))

        assert stat.percentage == 33.3

    def test_kpis(self):
        habits = [make_habit(1, date(2024, 1, 1)), make_habit(2, date(2024, 1, 1))]
        logs = [
            HabitLogResponse(id=1, habit_id=1, date=date(2024, 1, 1), completed_value=1),
            HabitLogResponse(id=2, habit_id=2, date=date(2024, 1, 1), completed_value=1),
            HabitLogResponse(id=3, habit_id=2, date=date(2024, 1, 2), completed_value=1),
        ]
        stats = analytics.habit_daily_stats(habits, logs, date(2024, 1, 1), date(2024, 1, 2))

        kpis = analytics.habit_kpis(stats, analytics.habit_logs_map(logs), habits)

        assert kpis.completion_rate == 75.0
        assert kpis.best_day == date(2024, 1, 1)
        assert kpis.total_completions == 3
        assert kpis.most_consistent_habit == "Habit 2"

    def test_kpis_without_data(self):
        kpis = analytics.habit_kpis([], {}, [])

        assert kpis.completion_rate == 0
        assert kpis.best_day is None
        assert kpis.most_consistent_habit is None


class TestTaskFilters:
    """Task filtering and ordering."""

    def test_incomplete_first_then_newest(self):
        tasks = [make_task(1), make_task(3, completed=True), make_task(5)]

        assert [t.id for t in analytics.sort_tasks(tasks)] == [5, 1, 3]

    def test_basic_filters(self):
        tasks = [make_task(1, priority="high"), make_task(2, completed=True), make_task(3)]

        assert [t.id for t in analytics.filter_tasks(tasks, "high")] == [1]
        assert [t.id for t in analytics.filter_tasks(tasks, "active")] == [3, 1]
        assert [t.id for t in analytics.filter_tasks(tasks, "completed")] == [2]

    def test_week_window_runs_sunday_to_saturday(self):
        # 2024-05-15 is a Wednesday
        tasks = [
            make_task(1, due_date=date(2024, 5, 12)),
            make_task(2, due_date=date(2024, 5, 18)),
            make_task(3, due_date=date(2024, 5, 19)),
            make_task(4, due_date=date(2024, 5, 11)),
            make_task(5),
        ]

        selected = analytics.filter_tasks(tasks, "all", "week", today=date(2024, 5, 15))

        assert [t.id for t in selected] == [2, 1]

    def test_today_and_month_windows(self):
        tasks = [make_task(1, due_date=date(2024, 5, 15)), make_task(2, due_date=date(2024, 5, 30))]
        today = date(2024, 5, 15)

        assert [t.id for t in analytics.filter_tasks(tasks, time_window="today", today=today)] == [1]
        assert [t.id for t in analytics.filter_tasks(tasks, time_window="month", today=today)] == [2, 1]

    def test_advanced_filter_replaces_basic(self):
        tasks = [
            make_task(1, priority="low", status="done", completed=True),
            make_task(2, priority="high", status="todo"),
            make_task(3, priority="low", status="todo", category="Work"),
        ]
        advanced = AdvancedTaskFilter(priorities=["low"])

        selected = analytics.filter_tasks(tasks, "active", "today", advanced, today=date(2024, 5, 15))

        assert [t.id for t in selected] == [3, 1]

    def test_advanced_date_range_excludes_undated(self):
        tasks = [make_task(1, due_date=date(2024, 5, 1)), make_task(2), make_task(3, due_date=date(2024, 7, 1))]
        advanced = AdvancedTaskFilter(start_date=date(2024, 4, 1), end_date=date(2024, 5, 31))

        assert [t.id for t in analytics.filter_tasks(tasks, advanced=advanced)] == [1]

    def test_empty_advanced_filter_is_ignored(self):
        tasks = [make_task(1, completed=True), make_task(2)]

        selected = analytics.filter_tasks(tasks, "active", advanced=AdvancedTaskFilter())

        assert [t.id for t in selected] == [2]

    def test_overview(self):
        tasks = [make_task(1, priority="high"), make_task(2, priority="high", completed=True), make_task(3)]

        overview = analytics.task_overview(tasks)

        assert (overview.total, overview.completed, overview.high_priority_pending) == (3, 1, 1)


class TestFinanceStats:
    """Installment and dashboard summaries."""

    def test_installment_summary(self):
        plans = [
            InstallmentResponse(id=1, name="Laptop", provider="Affirm", total_amount=1200, paid_amount=300,
                                total_months=12, paid_months=3, start_date=date(2024, 1, 1), category="Tech"),
            InstallmentResponse(id=2, name="Sofa", provider="Klarna", total_amount=600, paid_amount=0,
                                total_months=6, paid_months=0, start_date=date(2024, 2, 1), category="Home"),
        ]

        summary = analytics.installment_summary(plans)

        assert summary.total_debt == 1500
        assert summary.monthly_commitment == 200
        assert summary.plans[0].progress == 25.0
        assert summary.plans[0].remaining_months == 9

    def test_monthly_trends_through_current_month(self):
        transactions = [
            make_transaction(1, 1000, date(2024, 2, 3), type="income", category="Salary"),
            make_transaction(2, 400, date(2024, 2, 10)),
            make_transaction(3, 999, date(2023, 2, 10)),
        ]

        trends = analytics.monthly_trends(transactions, date(2024, 3, 31))

        assert [t.name for t in trends] == ["Jan", "Feb", "Mar"]
        assert (trends[1].income, trends[1].expense, trends[1].savings) == (1000, 400, 600)
        assert trends[0].savings == 0

    def test_analytics_without_income(self):
        stats = {s.label: s for s in analytics.analytics_stats([make_transaction(1, 60, date(2024, 1, 1))])}

        assert stats["Savings Rate"].value == "0.0%"
        assert stats["Net Cash Flow"].is_positive is False
        assert stats["Avg. Daily Spend"].value == "$2.00"

    def test_kpi_counts_all_installments(self):
        plan = InstallmentResponse(id=1, name="Phone", provider="Apple", total_amount=800, paid_amount=800,
                                   total_months=4, paid_months=4, start_date=date(2023, 1, 1), category="Tech")

        kpis = {s.label: s for s in analytics.kpi_stats([], [plan])}

        assert kpis["Active Installments"].value == "1"
        assert kpis["Net Savings"].value == "$0.00"
