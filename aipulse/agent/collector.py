"""
Collector: entrega a coleta de notícias a um agente LLM (claude-agent-sdk).

O agente busca cada fonte da whitelist, classifica, resume, deduplica e grava
em data/current.json. Aqui fica só a orquestração:

- monta o prompt e as opções (ferramentas WebFetch/Read/Write, modelo, resume)
- registra no log o stream de mensagens do agente
- captura o session_id da mensagem `init` e o persiste para a próxima execução

Uso:
    python -m aipulse.agent.collector      (ou `aipulse-collect`)
"""

import sys
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    SystemMessage,
    TextBlock,
    ToolUseBlock,
    query,
)

from aipulse import settings
from aipulse.agent.prompt import build_task_prompt
from aipulse.storage import repository, session
from aipulse.storage.models import NewsArticle, SessionPointer, Whitelist
from aipulse.utils.date_format import utc_now_iso
from aipulse.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


class CollectorError(Exception):
    pass


@dataclass
class RunReport:
    session_id: Optional[str] = None
    result_subtype: Optional[str] = None
    result_is_error: bool = False
    added: List[NewsArticle] = field(default_factory=list)
    started_at: Optional[str] = None
    finished_at: Optional[str] = None


def build_options(previous: Optional[SessionPointer], cwd: Optional[str] = None,
                  model: Optional[str] = None) -> ClaudeAgentOptions:
    options = ClaudeAgentOptions(
        allowed_tools=list(settings.ALLOWED_TOOLS),
        setting_sources=["project"],
        permission_mode="acceptEdits",
        cwd=cwd or settings.ROOT_DIR,
        model=model or settings.AGENT_MODEL,
    )
    if previous is not None:
        options.resume = previous.session_id
        logger.info("Resuming session %s", previous.session_id)
    else:
        logger.info("Starting a new session")
    return options


def handle_message(message, report: RunReport) -> None:
    """Registra uma mensagem do stream; só a primeira `init` define o session_id."""
    if isinstance(message, SystemMessage):
        if message.subtype == "init" and report.session_id is None:
            report.session_id = message.data.get("session_id")
            if report.session_id:
                logger.info("Session id: %s", report.session_id)
        return

    if isinstance(message, AssistantMessage):
        for block in message.content:
            if isinstance(block, TextBlock):
                logger.info(block.text)
            elif isinstance(block, ToolUseBlock):
                logger.info("Tool: %s", block.name)
        return

    if isinstance(message, ResultMessage):
        report.result_subtype = message.subtype
        report.result_is_error = bool(message.is_error)
        if message.is_error:
            logger.error("Agent finished with error: %s", message.subtype)
        else:
            logger.info("Agent finished: %s", message.subtype)


def report_new_articles(known_urls: Set[str], whitelist: Whitelist) -> List[NewsArticle]:
    """Relê o snapshot depois da execução e loga o que o agente adicionou."""
    try:
        after = repository.load_snapshot()
    except repository.SnapshotError as e:
        logger.error("Agent left an invalid snapshot: %s", e)
        return []
    if after is None:
        logger.error("Snapshot disappeared during the run")
        return []

    added = repository.new_articles(known_urls, after)
    logger.info("%d new article(s), %d total", len(added), len(after.news))

    allowed = {s.source_name for s in whitelist.sources}
    for article in added:
        if article.source_name not in allowed:
            logger.warning("Article %s comes from a source outside the whitelist: %s",
                           article.id, article.source_name)
    return added


async def run_collection() -> RunReport:
    report = RunReport(started_at=utc_now_iso())
    logger.info("AI Pulse collector starting")

    try:
        whitelist = repository.load_whitelist()
    except repository.WhitelistError as e:
        raise CollectorError(str(e)) from e
    logger.info("%d allowed source(s)", len(whitelist.sources))

    # Snapshot inválido de uma execução anterior não bloqueia a coleta
    try:
        known_urls = repository.ensure_snapshot().urls
    except repository.SnapshotError as e:
        logger.error("Existing snapshot is invalid, collecting anyway: %s", e)
        known_urls = repository.raw_snapshot_urls()

    previous = session.load()
    options = build_options(previous)
    prompt = build_task_prompt(whitelist, previous.session_id if previous else None)

    async for message in query(prompt=prompt, options=options):
        handle_message(message, report)

    if report.session_id:
        session.save(report.session_id)
    else:
        logger.warning("Agent never reported a session id; session file left untouched")

    report.added = report_new_articles(known_urls, whitelist)
    report.finished_at = utc_now_iso()
    logger.info("AI Pulse collector finished (start: %s, end: %s)",
                report.started_at, report.finished_at)
    return report


def main() -> int:
    setup_logging()
    try:
        asyncio.run(run_collection())
    except Exception:
        logger.exception("Collector failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
