"""Main CLI entry point for Jira to Pivotal CSV Tool."""

import click
from rich.console import Console
from rich.panel import Panel

from .commands.export import export
from .config.auth import JiraAuth

console = Console()


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version="0.1.0", prog_name="jira-pivotal")
def cli(ctx: click.Context):
    """Jira to Pivotal Tool - Export Jira projects as Pivotal Tracker CSV.

    Fetches every issue of the configured Jira projects and writes
    CSV files ready for Pivotal Tracker's CSV import.

    Examples:

    \b
    Test connection:
    $ python -m src.main test

    \b
    Export projects listed in JIRA_PROJECTS:
    $ python -m src.main export
    """
    if ctx.invoked_subcommand is None:
        console.print(Panel(
            "[bold cyan]Jira to Pivotal Tool[/bold cyan]\n\n"
            "Export Jira projects to Pivotal Tracker CSV files.\n\n"
            "[yellow]Available Commands:[/yellow]\n"
            "  test    - Test connection to Jira server\n"
            "  export  - Export Jira projects to Pivotal CSV\n\n"
            "[dim]Use --help with any command for detailed help.[/dim]\n"
            "[dim]Example: python -m src.main export --help[/dim]",
            title="Welcome",
            border_style="cyan"
        ))
        console.print(ctx.get_help())


@cli.command()
def test():
    """Test connection to Jira server with current credentials.

    Tests the connection to Jira using credentials from .env file.

    Examples:

    \b
    Test connection:
    $ python -m src.main test
    """
    try:
        auth = JiraAuth()
        success = auth.test_connection()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        console.print("[yellow]Please check your .env file configuration.[/yellow]")
        raise click.Abort()

    if not success:
        raise click.Abort()


# Register commands
cli.add_command(export)


if __name__ == '__main__':
    cli()
