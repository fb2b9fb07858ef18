from typing import Optional

from aipulse.settings import SNAPSHOT_REL_PATH, WHITELIST_REL_PATH
from aipulse.storage.models import Whitelist

SUMMARY_LANGUAGE = "Japanese"
SUMMARY_LENGTH = 100

TASK_TEMPLATE = """\
Collect AI industry news and save it to {snapshot}.

## Steps

1. Read the source list from {whitelist}. Only these sources are allowed:
{sources}
2. Run WebFetch on each source URL to get its content.
3. For every article extract:
   - title: the article title
   - url: the absolute article URL
   - publishedAt: publication time, ISO 8601
   - sourceName: the sourceName from {whitelist}
4. Classify the category:
   - Model: LLMs, foundation models, training methods
   - Service: APIs, products, services
   - Other: everything else
5. Decide the importance:
   - high: new model releases, major announcements
   - normal: everything else
6. Write a summary of about {summary_length} characters in {summary_language}.
7. Give each article a unique id in the form YYYYMMDD-NNN.
8. Save to {snapshot}:
   - set lastUpdated to the current time (ISO 8601)
   - append the new articles to the news array, keeping the existing ones

## Deduplication
- Skip articles (by URL) already collected in the previous session.
- Skip URLs that already exist in {snapshot}.
- Log every duplicate you skip.

## Notes
- If a URL cannot be fetched, log it and move on to the next source.
- Process every source.
"""


def format_sources(whitelist: Whitelist) -> str:
    return "\n".join(f"   - {s.source_name}: {s.url}" for s in whitelist.sources)


def build_task_prompt(whitelist: Whitelist, resume_session: Optional[str] = None) -> str:
    prompt = TASK_TEMPLATE.format(
        snapshot=SNAPSHOT_REL_PATH,
        whitelist=WHITELIST_REL_PATH,
        sources=format_sources(whitelist),
        summary_length=SUMMARY_LENGTH,
        summary_language=SUMMARY_LANGUAGE,
    )
    if resume_session:
        prompt += "\nThis run resumes the previous session; use what you collected there to skip duplicates.\n"
    return prompt
