"""
Unit tests for building Pivotal task records from Jira projects.

Run with:
    python -m pytest tests/test_task_builder.py -v
"""

from datetime import datetime, timezone

import pytest

from src.config.settings import ExportOptions
from src.models.issue import Issue, Project
from src.models.task import TaskType, TaskState
from src.services.task_builder import TaskBuilder, ProjectIndex


def _issue(key, **overrides):
    """Minimal Story issue; override any field."""
    base = {
        "key": key,
        "summary": f"Summary of {key}",
        "issue_type": "Story",
        "status": "To Do",
        "created": datetime(2019, 3, 1, 17, 30, tzinfo=timezone.utc),
        "reporter": "Ada Lovelace",
    }
    base.update(overrides)
    return Issue(**base)


def _subtask(key, parent, **overrides):
    return _issue(key, issue_type="Sub-task", parent_key=parent, **overrides)


@pytest.fixture
def options():
    return ExportOptions(jira_url="https://example.atlassian.net/")


@pytest.fixture
def builder(options):
    return TaskBuilder(options)


class TestProjectIndex:
    def test_groups_subtasks_by_parent_in_order(self):
        issues = [_issue("W-1"), _subtask("W-2", "W-1"), _subtask("W-3", "W-1"), _subtask("W-4", "W-9")]
        index = ProjectIndex(issues)
        assert [s.key for s in index.subtasks_for(issues[0], 10)] == ["W-2", "W-3"]

    def test_subtasks_limited(self):
        issues = [_issue("W-1")] + [_subtask(f"W-{i}", "W-1") for i in range(2, 8)]
        index = ProjectIndex(issues)
        assert [s.key for s in index.subtasks_for(issues[0], 2)] == ["W-2", "W-3"]

    def test_epic_lookup_requires_epic_type(self):
        story = _issue("W-2", epic_key="W-1")
        index = ProjectIndex([_issue("W-1"), story])
        assert index.epic_for(story) is None

    def test_epic_lookup(self):
        epic = _issue("W-1", issue_type="Epic")
        story = _issue("W-2", epic_key="W-1")
        assert ProjectIndex([epic, story]).epic_for(story) is epic


class TestTaskBuilder:
    def test_subtasks_never_become_records(self, builder):
        project = Project(title="Web", issues=[
            _issue("W-1"),
            _subtask("W-2", "W-1"),
            _issue("W-3", issue_type="Pair Sub-task", parent_key="W-1"),
        ])
        records = builder.build(project)
        assert [r.title for r in records] == ["Summary of W-1"]

    def test_keeps_source_order(self, builder):
        project = Project(title="Web", issues=[
            _issue("W-3"), _subtask("W-4", "W-3"), _issue("W-1", issue_type="Epic"), _issue("W-2"),
        ])
        assert [r.title for r in builder.build(project)] == [
            "Summary of W-3", "Summary of W-1", "Summary of W-2",
        ]

    def test_epic_is_exported_as_epic(self, builder):
        records = builder.build(Project(title="Web", issues=[_issue("W-1", issue_type="Epic")]))
        assert records[0].task_type == TaskType.EPIC

    def test_subtasks_capped_at_n(self):
        builder = TaskBuilder(ExportOptions(subtask_cap=3))
        issues = [_issue("W-1")] + [_subtask(f"W-{i}", "W-1") for i in range(2, 8)]
        record = builder.build(Project(title="Web", issues=issues))[0]
        assert [s.summary for s in record.subtasks] == ["Summary of W-2", "Summary of W-3", "Summary of W-4"]

    def test_subtask_count_is_min_of_actual_and_cap(self, builder):
        issues = [_issue("W-1"), _subtask("W-2", "W-1"), _subtask("W-3", "W-1")]
        assert len(builder.build(Project(title="Web", issues=issues))[0].subtasks) == 2

    def test_subtask_completion(self, builder):
        issues = [
            _issue("W-1"),
            _subtask("W-2", "W-1", resolution="Done"),
            _subtask("W-3", "W-1", resolution="Won't Do"),
            _subtask("W-4", "W-1"),
        ]
        record = builder.build(Project(title="Web", issues=issues))[0]
        assert [s.completed for s in record.subtasks] == [True, False, False]

    def test_epic_label_first_and_lowercased(self, builder):
        issues = [
            _issue("W-1", issue_type="Epic", summary="Checkout Flow"),
            _issue("W-2", epic_key="W-1", labels=["frontend", "urgent"]),
        ]
        record = builder.build(Project(title="Web", issues=issues))[1]
        assert record.labels == ["checkout flow", "frontend", "urgent"]
        assert record.to_row()["Labels"] == "checkout flow,frontend,urgent"

    def test_missing_epic_adds_no_label(self, builder):
        issues = [_issue("W-2", epic_key="W-404", labels=["frontend"])]
        record = builder.build(Project(title="Web", issues=issues))[0]
        assert record.labels == ["frontend"]

    def test_bug_example(self, builder):
        issues = [
            _issue("W-1", issue_type="Bug", status="Ready to Review", estimate=13),
            _subtask("W-2", "W-1", summary="Write tests", resolution="Done"),
        ]
        record = builder.build(Project(title="Web", issues=issues))[0]
        assert record.task_type == TaskType.BUG
        assert record.current_state == TaskState.ACCEPTED
        assert record.estimate == 8
        assert record.to_row()["Labels"] == ""
        assert [(s.summary, s.completed) for s in record.subtasks] == [("Write tests", True)]

    @pytest.mark.parametrize("estimate, expected", [(None, 0), (0, 0), (2.5, 2), (8, 8), (21, 8), (-1, 0)])
    def test_estimate_clamped(self, builder, estimate, expected):
        record = builder.build(Project(title="Web", issues=[_issue("W-1", estimate=estimate)]))[0]
        assert record.estimate == expected
        assert isinstance(record.estimate, int)

    def test_timestamps_in_target_zone(self, builder):
        issue = _issue("W-1", resolution_date=datetime(2019, 7, 1, 12, 0, tzinfo=timezone.utc))
        record = builder.build(Project(title="Web", issues=[issue]))[0]
        assert record.created_at == "2019-03-01T09:30:00-08:00"
        assert record.accepted_at == "2019-07-01T05:00:00-07:00"

    def test_unresolved_issue_has_no_accepted_at(self, builder):
        record = builder.build(Project(title="Web", issues=[_issue("W-1")]))[0]
        assert record.accepted_at is None

    def test_other_timezone(self):
        builder = TaskBuilder(ExportOptions(timezone="Europe/Berlin"))
        record = builder.build(Project(title="Web", issues=[_issue("W-1")]))[0]
        assert record.created_at == "2019-03-01T18:30:00+01:00"

    def test_people(self, builder):
        record = builder.build(Project(title="Web", issues=[_issue("W-1", assignee="grace")]))[0]
        assert record.requested_by == "Ada Lovelace"
        assert record.owned_by == "grace"

    def test_unassigned_and_no_reporter(self, builder):
        record = builder.build(Project(title="Web", issues=[_issue("W-1", reporter=None)]))[0]
        assert record.owned_by is None
        assert record.requested_by == ""

    def test_description_with_backlink(self, builder):
        record = builder.build(Project(title="Web", issues=[_issue("W-1", description='Say "hi"\nthen go')]))[0]
        assert record.description == (
            r'"Say \"hi\"\nthen go\\n\\nOriginal Jira Ticket: https://example.atlassian.net/browse/W-1"'
        )
        assert "\n" not in record.description

    def test_missing_description(self, builder):
        record = builder.build(Project(title="Web", issues=[_issue("W-1")]))[0]
        assert record.description == r'"\\n\\nOriginal Jira Ticket: https://example.atlassian.net/browse/W-1"'

    def test_empty_project(self, builder):
        assert builder.build(Project(title="Web")) == []


class TestExportOptions:
    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValueError):
            ExportOptions(timezone="Not/AZone")

    def test_known_timezone_accepted(self):
        assert ExportOptions(timezone="Europe/Berlin").timezone == "Europe/Berlin"
