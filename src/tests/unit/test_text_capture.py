"""Unit tests for text-to-task capture."""

from datetime import datetime, timezone

import pytest

from taskvantage.core.engine import AggregationEngine
from taskvantage.models import TaskPriority
from taskvantage.services.text_capture import (
    FALLBACK_TITLE,
    GENERATED_DESCRIPTION,
    capture_text_into_engine,
    extract_date_from_text,
    generate_tasks_from_text,
    parse_line_as_task,
)


class TestParseLine:
    """Tests for parse_line_as_task."""

    def test_todo_prefix_and_urgency(self, now: datetime) -> None:
        """Test the indicator is stripped and urgency raises priority."""
        task = parse_line_as_task("TODO: Call the vendor urgently", now)

        assert task is not None
        assert task.title == "Call the vendor urgently"
        assert task.priority == TaskPriority.HIGH
        assert task.description == GENERATED_DESCRIPTION

    def test_plain_line_is_medium(self, now: datetime) -> None:
        """Test lines without keywords default to medium priority."""
        task = parse_line_as_task("Review the quarterly budget", now)
        assert task is not None
        assert task.priority == TaskPriority.MEDIUM

    def test_priority_keyword_is_case_insensitive(self, now: datetime) -> None:
        """Test keywords match regardless of case."""
        assert parse_line_as_task("- Send slides ASAP", now).priority == TaskPriority.HIGH
        assert parse_line_as_task("Fix login, High Priority", now).priority == TaskPriority.HIGH

    def test_only_first_indicator_stripped(self, now: datetime) -> None:
        """Test a single indicator is removed from the start."""
        assert parse_line_as_task("Task: - nested dash item", now).title == "- nested dash item"
        assert parse_line_as_task("• Bullet point item", now).title == "Bullet point item"
        assert parse_line_as_task("3. Numbered list item", now).title == "Numbered list item"

    def test_length_bounds(self, now: datetime) -> None:
        """Test cleaned lines must be longer than 5 and shorter than 100 characters."""
        assert parse_line_as_task("- Shorts", now) is not None
        assert parse_line_as_task("- Short", now) is None
        assert parse_line_as_task("x" * 99, now) is not None
        assert parse_line_as_task("x" * 100, now) is None

    def test_due_date_from_line(self, now: datetime) -> None:
        """Test a date in the line becomes the due date."""
        task = parse_line_as_task("Submit report on 2026-04-01", now)
        assert task.due_date == datetime(2026, 4, 1, tzinfo=timezone.utc)

    def test_quantity_is_not_a_due_date(self, now: datetime) -> None:
        """Test a bare number in the line leaves the task undated."""
        task = parse_line_as_task("Order 12 chairs for the office", now)
        assert task.due_date is None

    def test_keyword_date_is_due_date(self, now: datetime) -> None:
        """Test a date after "by" becomes the due date."""
        task = parse_line_as_task("Submit by 2026-04-01", now)
        assert task.due_date == datetime(2026, 4, 1, tzinfo=timezone.utc)


class TestExtractDate:
    """Tests for extract_date_from_text."""

    def test_finds_date(self, now: datetime) -> None:
        """Test a month name with a day is found among words."""
        assert extract_date_from_text("deadline April 3 2026 for the draft", now) == datetime(
            2026, 4, 3, tzinfo=timezone.utc
        )

    def test_no_date(self, now: datetime) -> None:
        """Test text without a date yields None."""
        assert extract_date_from_text("Nothing to see here", now) is None

    @pytest.mark.parametrize(
        "text",
        [
            "Order 12 chairs for the office",
            "Call the vendor at 4",
            "May need to update the docs",
            "Decide 3 options for the venue",
            "Pick 12 marketing slogans",
        ],
    )
    def test_numbers_and_bare_months_are_not_dates(self, now: datetime, text: str) -> None:
        """Test numbers and month names without a day yield None."""
        assert extract_date_from_text(text, now) is None

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Ship on May 5", datetime(2026, 5, 5, tzinfo=timezone.utc)),
            ("Review the 3rd March 2027 minutes", datetime(2027, 3, 3, tzinfo=timezone.utc)),
            ("Pay invoices 4/1", datetime(2026, 4, 1, tzinfo=timezone.utc)),
            ("Send the invoice by Friday", datetime(2026, 3, 20, tzinfo=timezone.utc)),
        ],
    )
    def test_explicit_date_forms(self, now: datetime, text: str, expected: datetime) -> None:
        """Test each explicit date form is parsed against the current day."""
        assert extract_date_from_text(text, now) == expected

    def test_first_valid_date_wins(self, now: datetime) -> None:
        """Test an impossible date is skipped in favour of a later one."""
        assert extract_date_from_text("Moved from 2026-13-45 to 2026-04-02", now) == datetime(
            2026, 4, 2, tzinfo=timezone.utc
        )


class TestGenerateTasks:
    """Tests for generate_tasks_from_text."""

    def test_lines_become_tasks(self, now: datetime) -> None:
        """Test blank lines are dropped and each task-like line is kept."""
        text = "Meeting notes\n\n  TODO: Update the roadmap  \n- Book the venue urgently\nok\n"

        tasks = generate_tasks_from_text(text, now)

        assert [t.title for t in tasks] == ["Meeting notes", "Update the roadmap", "Book the venue urgently"]
        assert [t.priority for t in tasks] == [TaskPriority.MEDIUM, TaskPriority.MEDIUM, TaskPriority.HIGH]

    def test_fallback_review_task(self, now: datetime) -> None:
        """Test text with no task-like line yields a review task."""
        tasks = generate_tasks_from_text("Hi\nOk", now)

        assert len(tasks) == 1
        assert tasks[0].title == FALLBACK_TITLE
        assert tasks[0].description == "Hi\nOk"
        assert tasks[0].priority == TaskPriority.MEDIUM

    def test_fallback_preview_is_truncated(self, now: datetime) -> None:
        """Test the review task previews at most 200 characters."""
        text = "y" * 250

        description = generate_tasks_from_text(text, now)[0].description

        assert description == "y" * 200 + "..."

    def test_empty_text(self, now: datetime) -> None:
        """Test empty text yields nothing."""
        assert generate_tasks_from_text("", now) == []


class TestCaptureIntoEngine:
    """Tests for capture_text_into_engine."""

    def test_tasks_added_to_engine(self, engine: AggregationEngine, now: datetime) -> None:
        """Test captured tasks are stored and stamped with the engine clock."""
        stored = capture_text_into_engine(engine, "Action: Order new laptops\nTask: Renew domain name")

        assert len(stored) == 2
        assert {t.title for t in engine.tasks} == {"Order new laptops", "Renew domain name"}
        assert all(t.created_date == now for t in engine.tasks)
