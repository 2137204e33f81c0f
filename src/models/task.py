"""Pivotal Tracker task data models."""

from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Any, Dict, List, Optional

from ..utils.formatters import clamp_estimate


class TaskType(str, Enum):
    """Pivotal story types."""

    FEATURE = "Feature"
    BUG = "Bug"
    EPIC = "Epic"
    CHORE = "Chore"
    UNKNOWN = "Unknown"


class TaskState(str, Enum):
    """Pivotal story states used by the export."""

    STARTED = "Started"
    ACCEPTED = "Accepted"
    UNSTARTED = "Unstarted"


class SubtaskRef(BaseModel):
    """A sub-task carried as a Task/Task Status column pair."""

    model_config = ConfigDict(from_attributes=True)

    summary: str = Field(default="", description="Sub-task summary")
    completed: bool = Field(default=False, description="Resolved as Done")

    @property
    def status(self) -> str:
        return "Completed" if self.completed else "Not Completed"


class TaskRecord(BaseModel):
    """One Pivotal story built from a non-subtask Jira issue."""

    model_config = ConfigDict(from_attributes=True)

    title: str = Field(..., description="Story title")
    task_type: TaskType = Field(default=TaskType.UNKNOWN, description="Story type")
    current_state: TaskState = Field(default=TaskState.UNSTARTED, description="Story state")
    estimate: int = Field(default=0, ge=0, le=8, description="Points, clamped to [0, 8]")
    created_at: Optional[str] = Field(None, description="Creation time in the target zone")
    accepted_at: Optional[str] = Field(None, description="Resolution time in the target zone")
    requested_by: str = Field(default="", description="Reporter display name")
    owned_by: Optional[str] = Field(None, description="Assignee username")
    description: str = Field(default="", description="JSON-escaped description with Jira backlink")
    labels: List[str] = Field(default_factory=list, description="Epic label first, then issue labels")
    subtasks: List[SubtaskRef] = Field(default_factory=list, description="At most N sub-tasks")

    @field_validator('estimate', mode='before')
    @classmethod
    def validate_estimate(cls, v) -> int:
        """Clamp estimate into the range Pivotal accepts."""
        return clamp_estimate(v)

    def to_row(self) -> Dict[str, Any]:
        """Convert to dictionary keyed by Pivotal CSV field names."""
        return {
            "Title": self.title,
            "Labels": ",".join(self.labels),
            "Type": self.task_type.value,
            "Estimate": self.estimate,
            "Current State": self.current_state.value,
            "Created at": self.created_at,
            "Accepted at": self.accepted_at,
            "Requested by": self.requested_by,
            "Description": self.description,
            "Owned By": self.owned_by
        }
