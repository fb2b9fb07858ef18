import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aipulse.reader.categories import CATEGORY_CONFIG, FILTER_CHIPS, CategoryFilter
from aipulse.reader.detail import DetailView
from aipulse.reader.engine import category_counts, count_high_importance, visible_articles
from aipulse.reader.loader import LoadResult, LoadStatus
from aipulse.storage.models import NewsArticle
from aipulse.utils.date_format import format_date

logger = logging.getLogger(__name__)


def card_dom_id(article: NewsArticle) -> str:
    return f"card-{article.id}"


@dataclass
class ReaderState:
    """Estado da tela (filtro ativo + modal); vive só durante a requisição."""

    active_category: CategoryFilter = CategoryFilter.all
    detail: DetailView = field(default_factory=DetailView)

    def set_category(self, category: CategoryFilter) -> None:
        self.active_category = category

    def select(self, article_id: str, articles: List[NewsArticle]) -> bool:
        article = next((a for a in articles if a.id == article_id), None)
        if article is None:
            logger.warning("Selected article %s is not in the snapshot", article_id)
            return False
        self.detail.open(article, return_focus=card_dom_id(article))
        return True


def _card(article: NewsArticle, active: CategoryFilter, index: int) -> Dict[str, Any]:
    return {
        "delay_ms": index * 50,
        "article": article,
        "dom_id": card_dom_id(article),
        "config": CATEGORY_CONFIG[article.category],
        "high": article.is_high_importance,
        "date": format_date(article.published_at, "short"),
        "href": f"?category={active.value}&article={article.id}",
    }


def build_page_context(result: LoadResult, state: ReaderState) -> Dict[str, Any]:
    """Monta o contexto do template: error, empty ou content."""
    context: Dict[str, Any] = {
        "status": "loading",
        "error": None,
        "last_updated": "",
        "active": state.active_category,
        "close_href": f"?category={state.active_category.value}",
    }

    if result.status is LoadStatus.failure:
        context.update(status="error", error=result.error)
        return context
    if result.status is not LoadStatus.success or result.snapshot is None:
        return context

    snapshot = result.snapshot
    context["last_updated"] = format_date(snapshot.last_updated, "full")
    if not snapshot.news:
        context["status"] = "empty"
        return context

    counts = category_counts(snapshot.news)
    visible = visible_articles(snapshot.news, state.active_category)
    modal: Optional[Dict[str, Any]] = None
    if state.detail.is_open:
        article = state.detail.article
        modal = {
            "article": article,
            "config": CATEGORY_CONFIG[article.category],
            "high": article.is_high_importance,
            "date": format_date(article.published_at, "long"),
            "return_focus": state.detail.return_focus,
        }

    context.update(
        status="content",
        total=len(snapshot.news),
        high_count=count_high_importance(snapshot.news),
        chips=[
            {
                "key": chip.key.value,
                "label": chip.label,
                "icon": chip.icon,
                "active": chip.key is state.active_category,
                "count": counts[chip.key],
            }
            for chip in FILTER_CHIPS
        ],
        cards=[_card(a, state.active_category, i) for i, a in enumerate(visible)],
        modal=modal,
        scroll_locked=state.detail.scroll_locked,
    )
    return context
