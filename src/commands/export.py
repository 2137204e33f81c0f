"""Export command for Jira to Pivotal CSV Tool."""

from typing import List, Sequence, Tuple

import click
from rich.console import Console
from rich.panel import Panel

from ..config.auth import JiraAuth
from ..config.settings import get_settings
from ..models.issue import Project
from ..services.csv_service import CsvService, ALL_PROJECTS_NAME
from ..services.jira_service import JiraService
from ..services.task_builder import TaskBuilder

console = Console()


def build_documents(
    projects: Sequence[Project],
    builder: TaskBuilder,
    csv_service: CsvService
) -> List[Tuple[str, str]]:
    """Transform each project into its Pivotal CSV document.

    Returns:
        (project title, CSV text) pairs in project order
    """
    return [
        (project.title, csv_service.serialize(builder.build(project)))
        for project in projects
    ]


def write_documents(
    documents: Sequence[Tuple[str, str]],
    csv_service: CsvService,
    output_dir: str
) -> List[str]:
    """Write every project file and the combined file.

    A failed write does not stop the remaining ones.

    Returns:
        Names of the files that could not be written
    """
    failed = [
        name for name, csv_text in documents
        if not csv_service.write_project(name, csv_text, output_dir)
    ]
    if not csv_service.write_all_projects(documents, output_dir):
        failed.append(ALL_PROJECTS_NAME)
    return failed


@click.command()
@click.option(
    '--project', '-p',
    'projects',
    type=str,
    multiple=True,
    help='Jira project to export (repeatable, default: JIRA_PROJECTS)'
)
@click.option(
    '--output-dir',
    type=str,
    default=None,
    help='Directory for the CSV files (default: PIVOTAL_OUTPUT_DIR or projects)'
)
@click.option(
    '--subtasks',
    type=click.IntRange(min=0),
    default=None,
    help='Task/Task Status column pairs per row (default: PIVOTAL_SUBTASKS or 10)'
)
@click.option(
    '--timezone',
    type=str,
    default=None,
    help='Time zone for Created at / Accepted at (default: America/Los_Angeles)'
)
@click.option(
    '--page-size',
    type=click.IntRange(min=1),
    default=None,
    help='Issues per Jira search page (default: JIRA_PAGE_SIZE or 100)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Show verbose output'
)
def export(projects: Tuple[str, ...], output_dir: str, subtasks: int, timezone: str, page_size: int, verbose: bool):
    """Export Jira projects to Pivotal Tracker CSV files.

    Writes one CSV per project plus 'All Projects.csv' combining them.

    Examples:

    \b
    Export projects from .env (JIRA_PROJECTS):
    $ python -m src.main export

    \b
    Export two projects to a custom directory:
    $ python -m src.main export -p Web -p Mobile --output-dir out

    \b
    Export with 5 subtask columns:
    $ python -m src.main export -p Web --subtasks 5
    """
    try:
        settings = get_settings()
        titles = list(projects) or settings.project_titles
        output_dir = output_dir or settings.pivotal_output_dir

        if not titles:
            console.print(Panel(
                "[red]Error:[/red] No Jira projects to export.\n\n"
                "[yellow]Either:[/yellow]\n"
                "  set JIRA_PROJECTS=Web,Mobile in .env, or\n"
                "  export -p Web -p Mobile",
                title="Export Command",
                border_style="red"
            ))
            raise click.Abort()

        options = settings.export_options(subtask_cap=subtasks, timezone=timezone)

        auth = JiraAuth(settings)
        jira_service = JiraService(auth, page_size=page_size)
        builder = TaskBuilder(options)
        csv_service = CsvService(options)

        console.print("[cyan]Fetch all projects with issues from Jira[/cyan]")
        jira_projects = jira_service.get_projects_with_issues(titles)

        console.print("[cyan]Map Jira projects with issues to Pivotal projects with tasks[/cyan]")
        documents = build_documents(jira_projects, builder, csv_service)

        if verbose:
            for project in jira_projects:
                console.print(f"  [dim]{project.title}:[/dim] {len(project.issues)} issue(s)")

        console.print("[cyan]Write Pivotal projects to CSV files[/cyan]")
        failed = write_documents(documents, csv_service, output_dir)

        if failed:
            console.print(Panel(
                "[red]✗[/red] Some files could not be written:\n\n"
                + "\n".join(f"• {name}.csv" for name in failed),
                title="Export Incomplete",
                border_style="red"
            ))
            raise click.Abort()

        console.print(Panel(
            f"[green]✓[/green] Export completed successfully!\n\n"
            f"Directory: [cyan]{output_dir}[/cyan]\n"
            f"Projects: [green]{len(documents)}[/green]\n\n"
            f"[yellow]Next step:[/yellow] import the CSV files into Pivotal Tracker.",
            title="Export Success",
            border_style="green"
        ))

    except click.Abort:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Export cancelled by user.[/yellow]")
        raise click.Abort()
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {str(e)}")
        error_payload = getattr(e, 'error_payload', None)
        if error_payload:
            console.print(f"[yellow]Error details:[/yellow]\n{error_payload['formatted']}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise click.Abort()
