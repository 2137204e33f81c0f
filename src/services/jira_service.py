"""Jira API service for fetching project issues using requests library."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from ..config.auth import JiraAuth, safe_parse_response
from ..models.issue import Issue, Project

console = Console()

ISSUE_FIELDS = [
    'summary', 'issuetype', 'status', 'parent', 'labels', 'created',
    'resolutiondate', 'reporter', 'assignee', 'description', 'resolution'
]


class JiraFetchError(Exception):
    """Raised when Jira answers a search with something other than JSON."""


class JiraService:
    """Service for Jira API operations using requests library."""

    def __init__(self, auth: Optional[JiraAuth] = None, page_size: Optional[int] = None):
        """Initialize Jira service.

        Args:
            auth: Jira authentication handler (creates new if None)
            page_size: Issues per search page (defaults to JIRA_PAGE_SIZE)
        """
        self.auth = auth or JiraAuth()
        settings = self.auth.settings
        self.page_size = page_size or settings.jira_page_size
        self.max_pages = settings.jira_max_pages
        self.epic_link_field = settings.jira_epic_link_field
        self.estimate_field = settings.jira_estimate_field

    @property
    def fields(self) -> List[str]:
        """Fields requested from /search."""
        return ISSUE_FIELDS + [self.epic_link_field, self.estimate_field]

    def search_page(self, jql: str, page: int) -> List[Dict[str, Any]]:
        """Fetch one page of raw issues for a JQL query.

        Args:
            jql: JQL query string
            page: Zero-based page number

        Returns:
            Raw issue payloads of that page

        Raises:
            requests.exceptions.RequestException: On HTTP or network failure
            JiraFetchError: If Jira returns a non-JSON body
        """
        response = self.auth._make_request('GET', '/search', params={
            'jql': jql,
            'startAt': page * self.page_size,
            'maxResults': self.page_size,
            'fields': ','.join(self.fields)
        })

        result_data = safe_parse_response(response)
        if result_data.get('is_html'):
            raise JiraFetchError(f"Received HTML response from /search for: {jql}")

        return result_data.get('issues', [])

    def get_project_issues(self, title: str) -> List[Issue]:
        """Get all issues of a project ordered by ascending key.

        Pages are fetched concurrently and flattened in page order.
        Collection stops at the first page shorter than the page size.

        Args:
            title: Jira project name or key

        Returns:
            List of Issue objects
        """
        jql = f'PROJECT="{title}" ORDER BY key ASC'

        # Create the shared session before the page threads use it
        self.auth.session

        with ThreadPoolExecutor(max_workers=max(1, self.max_pages)) as executor:
            futures = [executor.submit(self.search_page, jql, page) for page in range(self.max_pages)]
            # result() re-raises fetch errors; they are fatal to the run
            pages = [future.result() for future in futures]

        raw_issues: List[Dict[str, Any]] = []
        for page in pages:
            raw_issues.extend(page)
            if len(page) < self.page_size:
                break

        return [
            Issue.from_jira(issue_data, self.epic_link_field, self.estimate_field)
            for issue_data in raw_issues
        ]

    def get_projects_with_issues(self, titles: List[str]) -> List[Project]:
        """Get each project with its full issue set.

        Args:
            titles: Jira project names or keys

        Returns:
            List of Project objects in the order of titles
        """
        projects = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Fetching issues from Jira...", total=len(titles))

            for title in titles:
                progress.update(task, description=f"Fetching issues for [cyan]{title}[/cyan]...")
                issues = self.get_project_issues(title)
                projects.append(Project(title=title, issues=issues))
                progress.advance(task)

            progress.update(task, description=f"[green]Fetched {len(projects)} project(s)[/green]")

        return projects
