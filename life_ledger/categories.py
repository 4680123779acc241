"""
Built-in finance categories shared by transactions, budgets and installments.

These are the defaults a new user is initialized with; users can add or
rename their own categories afterwards.
"""
from typing import Dict, List, NamedTuple, Optional


class CategoryConfig(NamedTuple):
    value: str
    label: str
    icon: str
    color: str


class InstallmentCategoryConfig(NamedTuple):
    value: str
    label: str
    maps_to: str  # expense category the plan's payments count against


FALLBACK_COLOR = "#6b7280"

EXPENSE_CATEGORIES: List[CategoryConfig] = [
    CategoryConfig("Food", "Food & Dining", "🍔", "#52525b"),
    CategoryConfig("Transport", "Transportation", "🚗", "#a1a1aa"),
    CategoryConfig("Entertainment", "Entertainment", "🎬", "#e4e4e7"),
    CategoryConfig("Utilities", "Utilities", "⚡", "#fbbf24"),
    CategoryConfig("Shopping", "Shopping", "🛍️", "#8b5cf6"),
    CategoryConfig("Housing", "Housing", "🏠", "#18181b"),
    CategoryConfig("Healthcare", "Healthcare", "🏥", "#ef4444"),
    CategoryConfig("Education", "Education", "📚", "#3b82f6"),
    CategoryConfig("Bills", "Bills & Subscriptions", "📄", "#10b981"),
    CategoryConfig("Other", "Other", "📦", "#6b7280"),
]

INCOME_CATEGORIES: List[CategoryConfig] = [
    CategoryConfig("Salary", "Salary", "💼", "#059669"),
    CategoryConfig("Freelance", "Freelance", "💻", "#0d9488"),
    CategoryConfig("Investment", "Investment", "📈", "#14b8a6"),
    CategoryConfig("Other Income", "Other Income", "💰", "#2dd4bf"),
]

INSTALLMENT_CATEGORIES: List[InstallmentCategoryConfig] = [
    InstallmentCategoryConfig("Tech", "Technology", "Shopping"),
    InstallmentCategoryConfig("Home", "Home & Furniture", "Housing"),
    InstallmentCategoryConfig("Travel", "Travel", "Entertainment"),
    InstallmentCategoryConfig("Fashion", "Fashion", "Shopping"),
    InstallmentCategoryConfig("Other", "Other", "Other"),
]

# Starting monthly limits; users customize them after setup
DEFAULT_BUDGET_LIMITS: Dict[str, float] = {
    "Food": 800,
    "Transport": 300,
    "Entertainment": 200,
    "Utilities": 250,
    "Shopping": 400,
    "Housing": 2000,
    "Healthcare": 500,
    "Education": 300,
    "Bills": 150,
    "Other": 200,
}


def get_category_config(category: str) -> Optional[CategoryConfig]:
    for config in EXPENSE_CATEGORIES + INCOME_CATEGORIES:
        if config.value == category:
            return config
    return None


def get_category_color(category: str) -> str:
    config = get_category_config(category)
    return config.color if config else FALLBACK_COLOR

