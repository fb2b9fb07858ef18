import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

from aipulse.storage.models import NewsArticle

logger = logging.getLogger(__name__)


class CloseTrigger(str, Enum):
    close_button = "close"
    escape = "escape"
    backdrop = "backdrop"


class DetailView:
    """
    Modal de detalhe: Closed (nenhum artigo) ou Open(artigo).

    Enquanto aberto, o foco fica preso no modal e o scroll da página é
    suspenso; ao fechar, ambos são liberados e o foco volta para o elemento
    que abriu o modal. Só um artigo fica aberto por vez.

    É o modelo da máquina de estados que static/reader.js executa no browser.
    No servidor cada requisição começa Closed e a página só usa `open()` (via
    `?article=`); fechar é navegar para o link sem `article`. `close()`,
    `holding()` e `CloseTrigger` descrevem os caminhos de fechamento do script
    (botão, Escape, backdrop), e `observable_state()` expõe o que a página vê.
    """

    def __init__(self) -> None:
        self.article: Optional[NewsArticle] = None
        self.return_focus: Optional[str] = None
        self.focus_trapped = False
        self.scroll_locked = False

    @property
    def is_open(self) -> bool:
        return self.article is not None

    def open(self, article: NewsArticle, return_focus: Optional[str] = None) -> None:
        if self.is_open:
            self._release()
        self.article = article
        self.return_focus = return_focus
        self.focus_trapped = True
        self.scroll_locked = True
        logger.debug("Detail view opened for %s", article.id)

    def close(self, trigger: CloseTrigger = CloseTrigger.close_button) -> Optional[str]:
        """Fecha o modal e devolve o id do elemento que deve receber o foco."""
        if not self.is_open:
            return None
        focus = self.return_focus
        logger.debug("Detail view for %s closed (%s)", self.article.id, trigger.value)
        self._release()
        return focus

    def _release(self) -> None:
        self.article = None
        self.return_focus = None
        self.focus_trapped = False
        self.scroll_locked = False

    @contextmanager
    def holding(self, article: NewsArticle, return_focus: Optional[str] = None) -> Iterator["DetailView"]:
        self.open(article, return_focus)
        try:
            yield self
        finally:
            self.close()

    def observable_state(self) -> dict:
        return {
            "article": self.article.id if self.article else None,
            "focus_trapped": self.focus_trapped,
            "scroll_locked": self.scroll_locked,
        }
