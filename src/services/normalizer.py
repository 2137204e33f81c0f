"""Mapping of Jira issue type and status vocabulary to Pivotal's."""

from typing import Optional

from ..models.issue import Issue
from ..models.task import TaskType, TaskState

ISSUE_TYPES = {
    'story': TaskType.FEATURE,
    'pair story': TaskType.FEATURE,
    'bug': TaskType.BUG,
    'pair bug': TaskType.BUG,
    'epic': TaskType.EPIC,
    'discussion': TaskType.CHORE,
    'task': TaskType.CHORE,
    'pair task': TaskType.CHORE,
    'sub-task': TaskType.CHORE,
    'pair sub-task': TaskType.CHORE,
}

# Matched exactly, as Jira workflow names are
STATUSES = {
    'In Progress': TaskState.STARTED,
    'Closed': TaskState.ACCEPTED,
    'Done': TaskState.ACCEPTED,
    'Ready to Review': TaskState.ACCEPTED,
    'Ready to Deploy': TaskState.ACCEPTED,
}


def normalize_issue_type(name: Optional[str]) -> TaskType:
    """Map a Jira issue type name to a Pivotal story type.

    Args:
        name: Jira issue type name, matched case-insensitively

    Returns:
        Matching TaskType, or TaskType.UNKNOWN for unrecognized names
    """
    return ISSUE_TYPES.get((name or '').lower(), TaskType.UNKNOWN)


def normalize_current_state(issue: Issue) -> TaskState:
    """Map an issue's workflow status to a Pivotal story state.

    Unrecognized statuses are Unstarted.
    """
    return STATUSES.get(issue.status or '', TaskState.UNSTARTED)
