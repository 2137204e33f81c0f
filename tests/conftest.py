"""Shared fixtures."""

import pytest

from src.config.settings import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings independent of the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        jira_server="https://example.atlassian.net/",
        jira_email="ada@example.com",
        jira_api_token="secret-token",
        jira_projects="Web,Mobile",
        jira_page_size=2,
        jira_max_pages=3,
        pivotal_subtasks=10,
        pivotal_timezone="America/Los_Angeles",
        pivotal_output_dir=str(tmp_path / "projects"),
    )
