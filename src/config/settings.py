"""Application settings management using Pydantic Settings."""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()


PIVOTAL_FIELDS = [
    "Title",
    "Labels",
    "Type",
    "Estimate",
    "Current State",
    "Created at",
    "Accepted at",
    "Requested by",
    "Description",
    "Owned By",
]

SUBTASK_COLUMNS = ["Task", "Task Status"]


class ExportOptions(BaseModel):
    """Options consumed by the transform pipeline.

    Built from Settings for a CLI run, or directly in tests.
    """

    subtask_cap: int = Field(default=10, ge=0, description="Subtask column pairs per row")
    timezone: str = Field(default="America/Los_Angeles", description="Target time zone for timestamps")
    fields: List[str] = Field(default_factory=lambda: list(PIVOTAL_FIELDS), description="CSV schema")
    jira_url: str = Field(default="", description="Jira base URL used for ticket backlinks")

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v) -> str:
        """Validate the IANA time zone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: {v}")
        return v

    @property
    def header(self) -> List[str]:
        """Full header: schema fields followed by the subtask column pairs."""
        return list(self.fields) + SUBTASK_COLUMNS * self.subtask_cap

    def browse_url(self, issue_key: str) -> str:
        """Get the Jira browse URL for an issue key."""
        return f"{self.jira_url.rstrip('/')}/browse/{issue_key}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Jira Configuration
    jira_server: str = os.getenv('JIRA_SERVER', '')
    jira_email: str = os.getenv('JIRA_EMAIL', '')
    jira_api_token: str = os.getenv('JIRA_API_TOKEN', '')
    jira_verify_ssl: bool = os.getenv('JIRA_VERIFY_SSL', 'true').lower() in ('true', '1', 'yes', 'on')
    jira_api_version: str = os.getenv('JIRA_API_VERSION', '2')
    jira_projects: str = os.getenv('JIRA_PROJECTS', '')  # Comma-separated project titles
    jira_page_size: int = int(os.getenv('JIRA_PAGE_SIZE', '100'))
    jira_max_pages: int = int(os.getenv('JIRA_MAX_PAGES', '6'))
    jira_epic_link_field: str = os.getenv('JIRA_EPIC_LINK_FIELD', 'customfield_10013')
    jira_estimate_field: str = os.getenv('JIRA_ESTIMATE_FIELD', 'customfield_10020')
    jira_timeout: float = float(os.getenv('JIRA_TIMEOUT', '30'))

    # Pivotal export configuration
    pivotal_subtasks: int = int(os.getenv('PIVOTAL_SUBTASKS', '10'))
    pivotal_timezone: str = os.getenv('PIVOTAL_TIMEZONE', 'America/Los_Angeles')
    pivotal_output_dir: str = os.getenv('PIVOTAL_OUTPUT_DIR', 'projects')

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def jira_url(self) -> str:
        """Get Jira server URL without trailing slash."""
        return self.jira_server.rstrip('/')

    @property
    def project_titles(self) -> List[str]:
        """Get configured Jira project titles."""
        return [title.strip() for title in self.jira_projects.split(',') if title.strip()]

    def export_options(
        self,
        subtask_cap: Optional[int] = None,
        timezone: Optional[str] = None
    ) -> ExportOptions:
        """Build export options, optionally overriding cap and time zone."""
        return ExportOptions(
            subtask_cap=self.pivotal_subtasks if subtask_cap is None else subtask_cap,
            timezone=timezone or self.pivotal_timezone,
            jira_url=self.jira_url
        )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
