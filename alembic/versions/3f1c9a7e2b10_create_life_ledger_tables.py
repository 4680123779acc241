"""create categories, habits, tasks and finance tables

Revision ID: 3f1c9a7e2b10
Revises: 
Create Date: 2026-10-19 10:12:44.381205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', sa.String(16), nullable=False),  # "income" | "expense"
        sa.Column('icon', sa.String(32), nullable=True),
        sa.Column('color', sa.String(32), nullable=True),
        sa.Column('budgeting_enabled', sa.Boolean, nullable=True, default=True),
        sa.Column('created_at', sa.DateTime, nullable=True, default=sa.func.now()),
    )
    op.create_index('idx_categories_user', 'categories', ['user_id'])

    op.create_table(
        'task_categories',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('color', sa.String(32), nullable=True),
        sa.Column('icon', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True, default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'name', name='uq_user_task_category_name'),
    )

    op.create_table(
        'habits',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('icon', sa.String(32), nullable=True),
        sa.Column('start_date', sa.Date, nullable=True),
        sa.Column('active_from_date', sa.Date, nullable=True),
        sa.Column('archived_at', sa.DateTime, nullable=True),
        sa.Column('frequency', sa.String(32), nullable=True, default='daily'),
        sa.Column('goal_target', sa.Float, nullable=True, default=1),
        sa.Column('created_at', sa.DateTime, nullable=True, default=sa.func.now()),
    )
    op.create_index('idx_habits_user', 'habits', ['user_id'])

    op.create_table(
        'habit_logs',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('habit_id', sa.Integer, sa.ForeignKey('habits.id'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('completed_value', sa.Float, nullable=True, default=0),
        sa.UniqueConstraint('habit_id', 'date', name='uq_habit_log_habit_date'),
    )
    op.create_index('idx_habit_logs_user_date', 'habit_logs', ['user_id', 'date'])

    # File-backed by default; the tables let them be routed to the database
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('amount', sa.Float, nullable=False),
        sa.Column('type', sa.String(16), nullable=False),  # "income" | "expense"
        sa.Column('icon', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True, default=sa.func.now()),
    )
    op.create_index('idx_transactions_user_date', 'transactions', ['user_id', 'date'])

    op.create_table(
        'budgets',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('limit', sa.Float, nullable=False, default=0),
        sa.Column('color', sa.String(32), nullable=True),
        sa.UniqueConstraint('user_id', 'category', name='uq_user_budget_category'),
    )

    op.create_table(
        'cards',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('bank_name', sa.String(255), nullable=False),
        sa.Column('holder', sa.String(255), nullable=False),
        sa.Column('balance', sa.Float, nullable=True, default=0),
        sa.Column('limit', sa.Float, nullable=True),
        sa.Column('type', sa.String(16), nullable=False),  # "debit" | "credit"
        sa.Column('number', sa.String(4), nullable=False),
        sa.Column('expiry', sa.String(7), nullable=True),
        sa.Column('pin', sa.String(8), nullable=True),
        sa.Column('color', sa.String(64), nullable=True),
        sa.Column('is_frozen', sa.Boolean, nullable=True, default=False),
    )

    op.create_table(
        'installments',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('provider', sa.String(255), nullable=False),
        sa.Column('total_amount', sa.Float, nullable=False),
        sa.Column('paid_amount', sa.Float, nullable=True, default=0),
        sa.Column('total_months', sa.Integer, nullable=False),
        sa.Column('paid_months', sa.Integer, nullable=True, default=0),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
    )

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('priority', sa.String(16), nullable=True, default='medium'),
        sa.Column('due_date', sa.Date, nullable=True),
        sa.Column('completed', sa.Boolean, nullable=True, default=False),
        sa.Column('status', sa.String(16), nullable=True, default='todo'),
        sa.Column('subtasks', sa.JSON, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True, default=sa.func.now()),
    )
    op.create_index('idx_tasks_user_due', 'tasks', ['user_id', 'due_date'])


def downgrade() -> None:
    op.drop_table('tasks')
    op.drop_table('installments')
    op.drop_table('cards')
    op.drop_table('budgets')
    op.drop_table('transactions')
    op.drop_table('habit_logs')
    op.drop_table('habits')
    op.drop_table('task_categories')
    op.drop_table('categories')
