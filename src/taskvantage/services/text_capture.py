"""Turn free text (e.g. OCR output from a scanned document) into draft tasks.

Each non-empty line is a candidate task. Lines are cleaned of list markers,
scored for urgency by keyword, and kept only when they look like a sentence
rather than a heading or a paragraph.
"""

import re
from datetime import datetime

from dateutil import parser as date_parser

from taskvantage.models import Task, TaskPriority, as_utc, utc_now
from taskvantage.utils.logging import get_logger

logger = get_logger(__name__)

TASK_INDICATORS = ("TODO:", "Task:", "Action:", "•", "-", "1.", "2.", "3.", "4.", "5.")
PRIORITY_KEYWORDS = ("urgent", "critical", "important", "asap", "high priority")

MIN_TITLE_LENGTH = 5
MAX_TITLE_LENGTH = 100
FALLBACK_PREVIEW_LENGTH = 200

GENERATED_DESCRIPTION = "Generated from scanned document"
FALLBACK_TITLE = "Review Scanned Document"

MONTH_NAMES = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
WEEKDAY_NAMES = r"monday|tuesday|wednesday|thursday|friday|saturday|sunday"
DATE_KEYWORDS = ("due", "deadline", "by", "before")

# A month name needs a day next to it, so "May need..." is not a date
DATE_PATTERN = re.compile(
    rf"""
    \b\d{{4}}-\d{{1,2}}-\d{{1,2}}\b
    | \b\d{{1,2}}/\d{{1,2}}(?:/\d{{2,4}})?\b
    | \b(?:{MONTH_NAMES})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?\b(?:,?\s+\d{{4}}\b)?
    | \b\d{{1,2}}(?:st|nd|rd|th)?\s+(?:{MONTH_NAMES})\b\.?(?:,?\s+\d{{4}}\b)?
    """,
    re.IGNORECASE | re.VERBOSE,
)
KEYWORD_WEEKDAY_PATTERN = re.compile(
    rf"\b(?:{'|'.join(DATE_KEYWORDS)})\s+(?:on\s+)?({WEEKDAY_NAMES})\b",
    re.IGNORECASE,
)


def _date_expressions(text: str) -> list[str]:
    found = [(match.start(), match.group()) for match in DATE_PATTERN.finditer(text)]
    found += [(match.start(1), match.group(1)) for match in KEYWORD_WEEKDAY_PATTERN.finditer(text)]
    return [expression for _, expression in sorted(found)]


def extract_date_from_text(text: str, now: datetime | None = None) -> datetime | None:
    """Find the first explicit date mentioned in text.

    Recognised forms are ISO and numeric dates (``2026-04-01``, ``4/1``),
    a month name with a day (``April 3``, ``3rd March 2026``) and a weekday
    after one of the DATE_KEYWORDS (``due Friday``). Bare numbers and bare
    month names are not dates. Missing components default to the current
    day at midnight UTC.

    Args:
        text: Text that may mention a date
        now: Reference time for missing components

    Returns:
        UTC datetime, or None if the text mentions no date
    """
    reference = as_utc(now) if now else utc_now()
    default = reference.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    for expression in _date_expressions(text):
        try:
            parsed = date_parser.parse(expression, default=default)
        except (ValueError, OverflowError):
            continue
        return as_utc(parsed)
    return None


def parse_line_as_task(line: str, now: datetime | None = None) -> Task | None:
    """Build a draft task from one line, or None if the line is not task-like."""
    lowered = line.casefold()
    priority = TaskPriority.MEDIUM
    if any(keyword in lowered for keyword in PRIORITY_KEYWORDS):
        priority = TaskPriority.HIGH

    cleaned = line
    for indicator in TASK_INDICATORS:
        if cleaned.startswith(indicator):
            cleaned = cleaned[len(indicator):].strip()
            break

    if not MIN_TITLE_LENGTH < len(cleaned) < MAX_TITLE_LENGTH:
        return None

    return Task(
        title=cleaned,
        description=GENERATED_DESCRIPTION,
        priority=priority,
        due_date=extract_date_from_text(cleaned, now),
        created_date=now or utc_now(),
    )


def generate_tasks_from_text(text: str, now: datetime | None = None) -> list[Task]:
    """Draft tasks from every task-like line of text.

    When no line qualifies but the text is not empty, a single review task
    carrying a preview of the text is returned instead.
    """
    lines = [line.strip() for line in text.splitlines()]
    tasks = [task for task in (parse_line_as_task(line, now) for line in lines if line) if task is not None]

    if not tasks and text:
        preview = text[:FALLBACK_PREVIEW_LENGTH]
        if len(text) > FALLBACK_PREVIEW_LENGTH:
            preview += "..."
        tasks.append(
            Task(
                title=FALLBACK_TITLE,
                description=preview,
                priority=TaskPriority.MEDIUM,
                created_date=now or utc_now(),
            )
        )

    logger.debug("tasks_generated_from_text", lines=len(lines), tasks=len(tasks))
    return tasks


def capture_text_into_engine(engine, text: str) -> list[Task]:
    """Generate draft tasks from text and add each one to the engine.

    Args:
        engine: AggregationEngine receiving the tasks
        text: Extracted document text

    Returns:
        The stored tasks
    """
    drafts = generate_tasks_from_text(text, engine.now())
    stored = [engine.add_task(task) for task in drafts]
    logger.info("text_captured", tasks=len(stored))
    return stored
