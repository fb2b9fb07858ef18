import sys
import asyncio
import logging

from apscheduler.schedulers.blocking import BlockingScheduler

from aipulse.settings import COLLECT_INTERVAL_MINUTES
from aipulse.agent.collector import run_collection
from aipulse.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def collect_job() -> None:
    # Uma execução sequencial por disparo; falha não derruba o agendamento
    try:
        asyncio.run(run_collection())
    except Exception:
        logger.exception("Scheduled collection failed")


def build_scheduler(interval_minutes: int = COLLECT_INTERVAL_MINUTES) -> BlockingScheduler:
    # Scheduler com configurações para evitar empilhamento de jobs
    scheduler = BlockingScheduler(
        job_defaults={
            "coalesce": True,         # junta execuções atrasadas
            "max_instances": 1,       # não roda duas coletas ao mesmo tempo
            "misfire_grace_time": 60,
        }
    )
    scheduler.add_job(collect_job, "interval", minutes=interval_minutes, id="collect_news")
    return scheduler


def main() -> int:
    setup_logging()
    scheduler = build_scheduler()
    logger.info("Collecting every %d minute(s)", COLLECT_INTERVAL_MINUTES)

    # Primeira execução imediata
    collect_job()
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
