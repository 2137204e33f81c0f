"""Jira issue data models."""

from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import datetime

from ..utils.formatters import parse_jira_datetime

SUBTASK_TYPES = ('Sub-task', 'Pair Sub-task')


def _name(value: Any, attr: str = 'name') -> Optional[str]:
    """Pull a name out of a Jira object field that may be missing."""
    if isinstance(value, dict):
        return value.get(attr)
    if isinstance(value, str):
        return value
    return None


class Issue(BaseModel):
    """Jira issue model."""

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True
    )

    key: str = Field(..., description="Issue key (e.g., PROJ-123)")
    summary: str = Field(default="", description="Issue summary")
    issue_type: str = Field(default="", alias="type", description="Issue type (Story, Bug, Epic, Sub-task)")
    status: Optional[str] = Field(None, description="Workflow status name")
    parent_key: Optional[str] = Field(None, description="Parent issue key (for Sub-tasks)")
    epic_key: Optional[str] = Field(None, description="Epic Link key")
    labels: List[str] = Field(default_factory=list, description="Issue labels")
    estimate: Optional[float] = Field(None, description="Story point estimate")
    created: Optional[datetime] = Field(None, description="Creation date")
    resolution_date: Optional[datetime] = Field(None, description="Resolution date")
    reporter: Optional[str] = Field(None, description="Reporter display name")
    assignee: Optional[str] = Field(None, description="Assignee username")
    description: Optional[str] = Field(None, description="Issue description")
    resolution: Optional[str] = Field(None, description="Resolution name (e.g., Done)")

    @property
    def is_subtask(self) -> bool:
        """Check if this issue is a sub-task type."""
        return self.issue_type in SUBTASK_TYPES

    @property
    def is_epic(self) -> bool:
        """Check if this issue is an Epic."""
        return self.issue_type == 'Epic'

    @classmethod
    def from_jira(
        cls,
        issue_data: Dict[str, Any],
        epic_link_field: str = 'customfield_10013',
        estimate_field: str = 'customfield_10020'
    ) -> "Issue":
        """Build an Issue from a raw Jira REST issue payload.

        Args:
            issue_data: One entry of the /search 'issues' array
            epic_link_field: Custom field holding the Epic Link key
            estimate_field: Custom field holding the story point estimate

        Returns:
            Issue with missing optional fields left empty
        """
        fields = issue_data.get('fields') or {}

        # Epic Link can be a plain key or an object with 'key'
        epic_link = fields.get(epic_link_field)
        if isinstance(epic_link, dict):
            epic_link = epic_link.get('key')

        assignee = fields.get('assignee')
        assignee_name = None
        if isinstance(assignee, dict):
            assignee_name = assignee.get('name') or assignee.get('accountId')

        estimate = fields.get(estimate_field)
        if not isinstance(estimate, (int, float)) or isinstance(estimate, bool):
            estimate = None

        description = fields.get('description')

        return cls(
            key=issue_data.get('key', ''),
            summary=fields.get('summary') or '',
            issue_type=_name(fields.get('issuetype')) or '',
            status=_name(fields.get('status')),
            parent_key=_name(fields.get('parent'), 'key'),
            epic_key=epic_link or None,
            labels=list(fields.get('labels') or []),
            estimate=estimate,
            created=parse_jira_datetime(fields.get('created')),
            resolution_date=parse_jira_datetime(fields.get('resolutiondate')),
            reporter=_name(fields.get('reporter'), 'displayName'),
            assignee=assignee_name,
            description=description if isinstance(description, str) else None,
            resolution=_name(fields.get('resolution'))
        )


class Project(BaseModel):
    """A Jira project with its full, flattened issue set."""

    title: str
    issues: List[Issue] = Field(default_factory=list)
