from enum import Enum
from typing import Dict, List, NamedTuple

from aipulse.storage.models import Category


class CategoryFilter(str, Enum):
    all = "All"
    model = "Model"
    service = "Service"
    other = "Other"


class CategoryConfig(NamedTuple):
    label: str
    icon: str
    css_class: str


class FilterChip(NamedTuple):
    key: CategoryFilter
    label: str
    icon: str


CATEGORY_CONFIG: Dict[Category, CategoryConfig] = {
    Category.model: CategoryConfig("MODEL", "🚀", "category-model"),
    Category.service: CategoryConfig("SERVICE", "⚡", "category-service"),
    Category.other: CategoryConfig("OTHER", "▤", "category-other"),
}

FILTER_CHIPS: List[FilterChip] = [
    FilterChip(CategoryFilter.all, "すべて", "▤"),
    FilterChip(CategoryFilter.model, "モデル", "🚀"),
    FilterChip(CategoryFilter.service, "サービス", "⚡"),
    FilterChip(CategoryFilter.other, "その他", "▤"),
]
