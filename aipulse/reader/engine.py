"""
Filtro e ordenação da lista de notícias exibida no reader.

Funções puras: nunca alteram a sequência recebida e devolvem listas novas.
Ordem de exibição:
    1. importance "high" antes de "normal"
    2. publishedAt mais recente primeiro
    3. empate de timestamp mantém a ordem de entrada (sort estável)
"""

from typing import Dict, Iterable, List, Tuple, Union

from aipulse.reader.categories import CategoryFilter
from aipulse.storage.models import Importance, NewsArticle
from aipulse.utils.date_format import parse_iso

FilterValue = Union[CategoryFilter, str]

_IMPORTANCE_RANK = {Importance.high: 0, Importance.normal: 1}


def _as_filter(category: FilterValue) -> CategoryFilter:
    # levanta ValueError para valores fora de All/Model/Service/Other
    return category if isinstance(category, CategoryFilter) else CategoryFilter(category)


def filter_articles(articles: Iterable[NewsArticle], category: FilterValue = CategoryFilter.all) -> List[NewsArticle]:
    flt = _as_filter(category)
    if flt is CategoryFilter.all:
        return list(articles)
    return [a for a in articles if a.category.value == flt.value]


def _sort_key(article: NewsArticle) -> Tuple[int, float]:
    dt = parse_iso(article.published_at)
    ts = dt.timestamp() if dt else float("-inf")
    return (_IMPORTANCE_RANK[article.importance], -ts)


def sort_articles(articles: Iterable[NewsArticle]) -> List[NewsArticle]:
    return sorted(articles, key=_sort_key)


def visible_articles(articles: Iterable[NewsArticle], category: FilterValue = CategoryFilter.all) -> List[NewsArticle]:
    return sort_articles(filter_articles(articles, category))


def count_high_importance(articles: Iterable[NewsArticle]) -> int:
    return sum(1 for a in articles if a.importance is Importance.high)


def category_counts(articles: Iterable[NewsArticle]) -> Dict[CategoryFilter, int]:
    items = list(articles)
    counts = {flt: 0 for flt in CategoryFilter}
    counts[CategoryFilter.all] = len(items)
    for a in items:
        counts[CategoryFilter(a.category.value)] += 1
    return counts
