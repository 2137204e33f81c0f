"""
Unit tests for building Issue models from Jira REST payloads.

Run with:
    python -m pytest tests/test_issue_model.py -v
"""

from datetime import datetime, timezone

from src.models.issue import Issue


def _payload(**field_overrides):
    """Jira /search issue payload with every field the export reads."""
    fields = {
        "summary": "Checkout page",
        "issuetype": {"name": "Story"},
        "status": {"name": "In Progress"},
        "parent": None,
        "labels": ["frontend"],
        "created": "2019-03-01T17:30:00.000+0000",
        "resolutiondate": None,
        "reporter": {"displayName": "Ada Lovelace"},
        "assignee": {"name": "grace", "accountId": "abc123"},
        "description": "Build the checkout page",
        "resolution": None,
        "customfield_10013": "WEB-1",
        "customfield_10020": 5.0,
    }
    fields.update(field_overrides)
    return {"key": "WEB-2", "fields": fields}


class TestIssueFromJira:
    def test_full_payload(self):
        issue = Issue.from_jira(_payload())
        assert issue.key == "WEB-2"
        assert issue.summary == "Checkout page"
        assert issue.issue_type == "Story"
        assert issue.status == "In Progress"
        assert issue.parent_key is None
        assert issue.epic_key == "WEB-1"
        assert issue.labels == ["frontend"]
        assert issue.estimate == 5.0
        assert issue.created == datetime(2019, 3, 1, 17, 30, tzinfo=timezone.utc)
        assert issue.resolution_date is None
        assert issue.reporter == "Ada Lovelace"
        assert issue.assignee == "grace"
        assert issue.description == "Build the checkout page"
        assert issue.resolution is None

    def test_subtask_payload(self):
        issue = Issue.from_jira(_payload(
            issuetype={"name": "Sub-task"},
            parent={"key": "WEB-2"},
            resolution={"name": "Done"},
            resolutiondate="2019-03-02T10:00:00.000+0000",
        ))
        assert issue.is_subtask
        assert issue.parent_key == "WEB-2"
        assert issue.resolution == "Done"
        assert issue.resolution_date == datetime(2019, 3, 2, 10, 0, tzinfo=timezone.utc)

    def test_minimal_payload(self):
        issue = Issue.from_jira({"key": "WEB-9", "fields": {}})
        assert issue.key == "WEB-9"
        assert issue.summary == ""
        assert issue.issue_type == ""
        assert issue.labels == []
        assert issue.epic_key is None
        assert issue.estimate is None
        assert issue.created is None
        assert issue.reporter is None
        assert issue.assignee is None
        assert issue.description is None

    def test_epic_link_as_object(self):
        issue = Issue.from_jira(_payload(customfield_10013={"key": "WEB-7"}))
        assert issue.epic_key == "WEB-7"

    def test_custom_field_ids(self):
        payload = _payload(customfield_10014="WEB-8", customfield_10016=3)
        issue = Issue.from_jira(payload, epic_link_field="customfield_10014", estimate_field="customfield_10016")
        assert issue.epic_key == "WEB-8"
        assert issue.estimate == 3

    def test_non_numeric_estimate_ignored(self):
        assert Issue.from_jira(_payload(customfield_10020="large")).estimate is None

    def test_assignee_falls_back_to_account_id(self):
        issue = Issue.from_jira(_payload(assignee={"accountId": "abc123"}))
        assert issue.assignee == "abc123"

    def test_rich_text_description_ignored(self):
        issue = Issue.from_jira(_payload(description={"type": "doc", "content": []}))
        assert issue.description is None

    def test_epic_flags(self):
        issue = Issue.from_jira(_payload(issuetype={"name": "Epic"}))
        assert issue.is_epic
        assert not issue.is_subtask
