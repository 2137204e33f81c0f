"""Jira authentication using basic auth with requests library."""

import json
import urllib3
from typing import Optional, Dict, Any
import requests
from requests.auth import HTTPBasicAuth
from rich.console import Console
from rich.panel import Panel

from .settings import Settings, get_settings

console = Console()


def extract_jira_error_payload(response: requests.Response) -> Dict[str, Any]:
    """Extract error payload from JIRA REST API response.

    JIRA REST API returns errors in the following format:
    {
        "errorMessages": ["Error message 1", "Error message 2"],
        "errors": {
            "field1": "Field-specific error"
        }
    }

    Args:
        response: requests.Response object with error status

    Returns:
        Dictionary with raw, errorMessages, errors, formatted and json_pretty keys
    """
    result = {
        'raw': None,
        'errorMessages': [],
        'errors': {},
        'formatted': '',
        'json_pretty': ''
    }

    try:
        error_data = response.json()
        result['raw'] = error_data
        result['errorMessages'] = error_data.get('errorMessages', [])
        result['errors'] = error_data.get('errors', {})

        formatted_parts = []

        if result['errorMessages']:
            formatted_parts.append("Error Messages:")
            for msg in result['errorMessages']:
                formatted_parts.append(f"  • {msg}")

        if result['errors']:
            if formatted_parts:
                formatted_parts.append("")
            formatted_parts.append("Field Errors:")
            for field, error in result['errors'].items():
                formatted_parts.append(f"  • {field}: {error}")

        result['formatted'] = '\n'.join(formatted_parts) if formatted_parts else "No error details available"
        result['json_pretty'] = json.dumps(error_data, indent=2)

    except (ValueError, AttributeError):
        # Not a JSON object, use raw text
        result['raw'] = {'text': response.text}
        result['formatted'] = f"Raw response: {response.text[:500]}"
        result['json_pretty'] = response.text[:500]

    return result


def safe_parse_response(response: requests.Response) -> Dict[str, Any]:
    """Parse a JSON response, flagging HTML bodies instead of raising.

    Some JIRA proxies answer with an HTML login page and a 200 status.

    Returns:
        Parsed JSON, or {'is_html': True, 'text': ...} when the body is not JSON
    """
    try:
        return response.json()
    except ValueError:
        return {'is_html': True, 'text': response.text}


class JiraAuth:
    """Jira authentication handler using requests library."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize Jira authentication.

        Args:
            settings: Application settings (defaults to loading from env)
        """
        self.settings = settings or get_settings()
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create requests session with authentication."""
        if self._session is None:
            if not all([self.settings.jira_server, self.settings.jira_email, self.settings.jira_api_token]):
                raise ValueError(
                    "Missing required Jira credentials. "
                    "Please set JIRA_SERVER, JIRA_EMAIL, and JIRA_API_TOKEN in .env file"
                )

            self._session = requests.Session()
            self._session.auth = HTTPBasicAuth(self.settings.jira_email, self.settings.jira_api_token)

            if not self.settings.jira_verify_ssl:
                self._session.verify = False
                urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

            self._session.headers.update({
                'Content-Type': 'application/json',
                'Accept': 'application/json'
            })

        return self._session

    @property
    def base_url(self) -> str:
        """Get base JIRA API URL."""
        api_version = (self.settings.jira_api_version or '2').strip()
        return f"{self.settings.jira_url}/rest/api/{api_version}"

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make HTTP request to JIRA API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., '/search', '/myself')
            **kwargs: Additional arguments to pass to requests

        Returns:
            requests.Response object

        Raises:
            requests.exceptions.HTTPError: If HTTP error occurs (4xx, 5xx)
        """
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault('timeout', self.settings.jira_timeout)
        response = self.session.request(method, url, **kwargs)

        if not response.ok:
            error_payload = extract_jira_error_payload(response)
            http_error = requests.exceptions.HTTPError(
                f"{response.status_code} Client Error for url: {url}\n\n{error_payload['formatted']}",
                response=response
            )
            # Attach error payload to exception for easier access
            http_error.error_payload = error_payload
            raise http_error

        return response

    def test_connection(self) -> bool:
        """Test connection to Jira server via the /myself endpoint.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            user_info = safe_parse_response(self._make_request('GET', '/myself'))
            if user_info.get('is_html'):
                console.print(Panel(
                    "[red]✗[/red] Jira answered with HTML instead of JSON.\n\n"
                    f"Server: {self.settings.jira_url}\n"
                    "Check JIRA_SERVER and any SSO proxy in front of Jira.",
                    title="Connection Error",
                    border_style="red"
                ))
                return False

            console.print(Panel(
                f"[green]✓[/green] Connected to Jira successfully!\n\n"
                f"Server: {self.settings.jira_url}\n"
                f"API Base: {self.base_url}\n"
                f"Display Name: {user_info.get('displayName', self.settings.jira_email)}\n"
                f"Username: {user_info.get('name', user_info.get('accountId', 'N/A'))}",
                title="Connection Test",
                border_style="green"
            ))
            return True

        except requests.exceptions.HTTPError as e:
            error_payload = getattr(e, 'error_payload', None)
            status_code = e.response.status_code if e.response is not None else 'Unknown'
            console.print(Panel(
                f"[red]✗[/red] Connection failed! (HTTP {status_code})\n\n"
                f"[yellow]Error Details:[/yellow]\n{error_payload['formatted'] if error_payload else str(e)}\n\n"
                f"[yellow]Please check:[/yellow]\n"
                f"• JIRA_SERVER is correct: {self.settings.jira_url}\n"
                f"• JIRA_EMAIL is correct: {self.settings.jira_email}\n"
                f"• JIRA_API_TOKEN is valid (not expired)\n"
                f"• JIRA_API_VERSION is correct: {self.settings.jira_api_version}",
                title="Connection Error",
                border_style="red"
            ))
            return False
        except requests.exceptions.RequestException as e:
            console.print(Panel(
                f"[red]✗[/red] Connection failed!\n\n"
                f"Error: {str(e)}\n\n"
                f"Please check network connectivity and JIRA_VERIFY_SSL.",
                title="Connection Error",
                border_style="red"
            ))
            return False

    def close(self):
        """Close Jira session connection."""
        if self._session:
            self._session.close()
            self._session = None
