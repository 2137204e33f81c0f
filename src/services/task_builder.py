"""Builds Pivotal task records from a Jira project's issues."""

import json
from typing import Dict, List, Optional
from collections import defaultdict

from ..config.settings import ExportOptions
from ..models.issue import Issue, Project
from ..models.task import SubtaskRef, TaskRecord
from ..utils.formatters import format_datetime
from .normalizer import normalize_issue_type, normalize_current_state


class ProjectIndex:
    """Parent and Epic lookups for one project's flat issue list."""

    def __init__(self, issues: List[Issue]):
        """Index issues once so each task is resolved without rescans.

        Args:
            issues: All issues of a project (tasks, sub-tasks and epics mixed)
        """
        self.subtasks_map: Dict[str, List[Issue]] = defaultdict(list)  # parent_key -> subtasks
        self.epics: Dict[str, Issue] = {}

        for issue in issues:
            if issue.is_subtask and issue.parent_key:
                self.subtasks_map[issue.parent_key].append(issue)
            elif issue.is_epic and issue.key not in self.epics:
                self.epics[issue.key] = issue

    def subtasks_for(self, issue: Issue, limit: int) -> List[Issue]:
        """Get the first `limit` sub-tasks of an issue in source order."""
        return self.subtasks_map.get(issue.key, [])[:limit]

    def epic_for(self, issue: Issue) -> Optional[Issue]:
        """Get the Epic linked to an issue, if it is in this project."""
        if not issue.epic_key:
            return None
        return self.epics.get(issue.epic_key)


class TaskBuilder:
    """Converts Jira issues into Pivotal task records."""

    def __init__(self, options: Optional[ExportOptions] = None):
        """Initialize task builder.

        Args:
            options: Export options (defaults to ExportOptions())
        """
        self.options = options or ExportOptions()

    def build(self, project: Project) -> List[TaskRecord]:
        """Build one task record per non-subtask issue of a project.

        Sub-tasks only appear as SubtaskRefs of their parent.

        Args:
            project: Project with its full issue set

        Returns:
            List of TaskRecord in source order
        """
        index = ProjectIndex(project.issues)
        return [
            self.build_task(issue, index)
            for issue in project.issues
            if not issue.is_subtask
        ]

    def build_task(self, issue: Issue, index: ProjectIndex) -> TaskRecord:
        """Build the task record for a single issue.

        Args:
            issue: Non-subtask issue
            index: Lookups for the issue's project

        Returns:
            TaskRecord
        """
        epic = index.epic_for(issue)
        labels = [epic.summary.lower()] if epic else []
        labels.extend(issue.labels)

        subtasks = [
            SubtaskRef(summary=subtask.summary, completed=subtask.resolution == 'Done')
            for subtask in index.subtasks_for(issue, self.options.subtask_cap)
        ]

        return TaskRecord(
            title=issue.summary,
            task_type=normalize_issue_type(issue.issue_type),
            current_state=normalize_current_state(issue),
            estimate=issue.estimate,
            created_at=format_datetime(issue.created, self.options.timezone),
            accepted_at=format_datetime(issue.resolution_date, self.options.timezone),
            requested_by=issue.reporter or '',
            owned_by=issue.assignee,
            description=self.build_description(issue),
            labels=labels,
            subtasks=subtasks
        )

    def build_description(self, issue: Issue) -> str:
        """Build the single-line JSON string description with a Jira backlink.

        The newlines are written as literal backslash escapes, which
        Pivotal renders as line breaks.
        """
        text = (
            f"{issue.description or ''}\\n\\n"
            f"Original Jira Ticket: {self.options.browse_url(issue.key)}"
        )
        return json.dumps(text, ensure_ascii=False)
