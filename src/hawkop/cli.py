"""
HawkOp - StackHawk CLI companion

Command-line entry point.

Usage:
    hawkop init
    hawkop status
    hawkop org list
    hawkop scan list --app billing --status COMPLETED --limit 10
    hawkop scan alerts <scan-id> --severity High --format json
"""

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .api.client import PlatformClient
from .api.filters import (
    apply_limit,
    filter_alerts_by_severity,
    filter_applications_by_status,
    filter_members_by_role,
    filter_scans,
    find_scan,
)
from .api.models import PaginationOptions
from .core.config import DEFAULT_BASE_URL, ClientConfig
from .core.credentials import CredentialStore, Credentials
from .core.errors import ConfigurationError, HawkOpError, PersistError
from .core.logging_setup import configure_logging
from .format import (
    alerts_table,
    applications_table,
    members_table,
    organizations_table,
    scan_overview_table,
    scan_stats_table,
    scans_table,
    teams_table,
    to_json,
)
from .version import get_detailed_version, get_info


DEFAULT_SORT_FIELD = "timestamp"
DEFAULT_SORT_DIR = "desc"


@dataclass
class CliContext:
    """Per-invocation state shared by all commands"""
    store: CredentialStore
    config: ClientConfig
    console: Console
    err_console: Console


def mask_key(api_key: str) -> str:
    """First 8 characters, the rest starred"""
    return api_key[:8] + "*" * max(0, len(api_key) - 8)


# ----------------------------------------------------------------------
# Shared helpers
# ----------------------------------------------------------------------

def _fail(obj: CliContext, message: str):
    obj.err_console.print(f"[bold red]✗[/bold red] {escape(message)}")
    sys.exit(1)


def _load_credentials(obj: CliContext) -> Credentials:
    try:
        return obj.store.load()
    except ConfigurationError as e:
        _fail(obj, f"Configuration error: {e}")


def _save_credentials(obj: CliContext, credentials: Credentials):
    try:
        obj.store.save(credentials)
    except PersistError as e:
        _fail(obj, str(e))


def _require_api_key(obj: CliContext, credentials: Credentials):
    if not credentials.has_api_key():
        _fail(obj, "No API key configured. Please run 'hawkop init' first.")


def _resolve_org(obj: CliContext, credentials: Credentials, org: Optional[str]) -> str:
    org_id = org or credentials.org_id
    if not org_id:
        _fail(
            obj,
            "No organization specified. Use --org flag or set a default with "
            "'hawkop org set <org-id>'",
        )
    return org_id


def _call_api(
    obj: CliContext,
    credentials: Credentials,
    action: str,
    operation: Callable[[PlatformClient], Awaitable[Any]],
) -> Any:
    """Run one API operation to completion, failing the command on error."""

    async def runner():
        async with PlatformClient(credentials, obj.store, obj.config) as client:
            return await operation(client)

    try:
        return asyncio.run(runner())
    except HawkOpError as e:
        _fail(obj, f"Failed to {action}: {e}")


def _emit(
    obj: CliContext,
    output_format: str,
    items: Sequence[Any],
    table_factory: Callable[[Sequence[Any]], Table],
    empty_message: str,
):
    if output_format.lower() == "json":
        click.echo(to_json(items))
        return
    if not items:
        obj.console.print(empty_message)
        return
    obj.console.print(table_factory(items))


def format_option(func):
    return click.option(
        "--format", "-f", "output_format",
        type=click.Choice(["table", "json"], case_sensitive=False),
        default="table", show_default=True,
        help="Output format",
    )(func)


def limit_option(func):
    return click.option(
        "--limit", "-l", default=0, type=int,
        help="Limit number of results (0 = no limit)",
    )(func)


def org_option(func):
    return click.option(
        "--org", "-o", default=None,
        help="Organization ID (uses default if not specified)",
    )(func)


# ----------------------------------------------------------------------
# Root
# ----------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="HawkOp")
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="HAWKOP_CONFIG",
    default=None,
    help="Config file (default: ~/.config/hawkop/config.json)",
)
@click.option(
    "--base-url",
    envvar="HAWKOP_BASE_URL",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="StackHawk API base URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def cli(ctx, config_file: Optional[Path], base_url: str, verbose: bool):
    """
    HawkOp - StackHawk CLI companion

    Streamlined access to StackHawk organizations, applications, scans
    and findings directly from the terminal.
    """
    configure_logging(verbose)
    ctx.obj = CliContext(
        store=CredentialStore(config_file),
        config=ClientConfig(base_url=base_url),
        console=Console(),
        err_console=Console(stderr=True),
    )


@cli.command()
@click.pass_obj
def init(obj: CliContext):
    """
    Initialize hawkop with your StackHawk API key.

    The API key is stored in your local configuration file (readable only by
    you) and exchanged for short-lived tokens as needed. Optionally set a
    default organization for later commands.
    """
    console = obj.console
    console.print("\n[bold cyan]Welcome to HawkOp![/bold cyan]\n")
    console.print("Let's set up your StackHawk credentials...\n")

    credentials = _load_credentials(obj)

    current_key = credentials.api_key
    if current_key:
        console.print(f"Current API key: {mask_key(current_key)}")
        prompt = "Enter new API key (or press Enter to keep current)"
    else:
        prompt = "Enter your StackHawk API key"

    api_key = click.prompt(prompt, default="", show_default=False, hide_input=True).strip()
    if api_key:
        credentials.set_api_key(api_key)
    elif not current_key:
        _fail(obj, "API key is required")

    if credentials.org_id:
        console.print(f"Current default org ID: {credentials.org_id}")
        prompt = "Enter new org ID (or press Enter to keep current)"
    else:
        prompt = "Enter default org ID (optional)"

    org_id = click.prompt(prompt, default="", show_default=False).strip()
    if org_id:
        credentials.set_org_id(org_id)

    _save_credentials(obj, credentials)

    console.print("\n[bold green]✓ Configuration saved successfully![/bold green]")
    console.print(f"   Config file: {obj.store.path}")
    console.print(f"   API key: {mask_key(credentials.api_key)}")
    if credentials.org_id:
        console.print(f"   Default org ID: {credentials.org_id}")
    console.print("\nYou can now use hawkop commands. Try:")
    console.print("  hawkop status")
    console.print("  hawkop org list")


@cli.command()
@click.pass_obj
def status(obj: CliContext):
    """Show hawkop configuration and connection status"""
    console = obj.console
    console.print("\n[bold cyan]HawkOp Status[/bold cyan]\n")

    try:
        credentials = obj.store.load()
    except ConfigurationError as e:
        console.print(f"[red]✗ Configuration Error:[/red] {escape(str(e))}")
        return

    console.print(f"[green]Config file:[/green] {obj.store.path}\n")

    if credentials.has_api_key():
        console.print("[green]API Key:[/green] [bold green]✓ Configured[/bold green]")
        console.print(f"   Key: {mask_key(credentials.api_key)}")
    else:
        console.print("[green]API Key:[/green] [red]✗ Not configured[/red]")
        console.print("   Run 'hawkop init' to set up your API key")
    console.print()

    if credentials.org_id:
        console.print("[green]Default Org:[/green] [bold green]✓ Set[/bold green]")
        console.print(f"   Organization ID: {credentials.org_id}")
    else:
        console.print("[green]Default Org:[/green] [red]✗ Not set[/red]")
        console.print("   Use 'hawkop org set <org-id>' to set a default organization")
    console.print()

    token = credentials.token
    if token is None:
        console.print("[green]Token:[/green] [dim]None[/dim]")
        if credentials.has_api_key():
            console.print("   A token will be automatically obtained when needed")
    else:
        expires = token.expires_at.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")
        if token.is_expired():
            console.print("[green]Token:[/green] [yellow]Expired[/yellow]")
            console.print(f"   Expired at: {expires}")
            console.print("   A fresh token will be obtained automatically")
        else:
            console.print("[green]Token:[/green] [bold green]✓ Valid[/bold green]")
            console.print(f"   Expires at: {expires}")
    console.print()

    if credentials.has_api_key():
        console.print("[green]Overall Status:[/green] [bold green]✓ Ready[/bold green]")
        console.print("   You can now use hawkop commands")
    else:
        console.print("[green]Overall Status:[/green] [red]✗ Not ready[/red]")
        console.print("   Please run 'hawkop init' to configure your API key")


@cli.command()
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text", show_default=True,
    help="Output format",
)
def version(output_format: str):
    """Show hawkop version information"""
    if output_format.lower() == "json":
        click.echo(to_json(get_info()))
    else:
        click.echo(get_detailed_version())


# ----------------------------------------------------------------------
# Organizations
# ----------------------------------------------------------------------

@cli.group()
def org():
    """Manage organization settings"""
    pass


@org.command("set")
@click.argument("org_id")
@click.pass_obj
def org_set(obj: CliContext, org_id: str):
    """Set the default organization ID"""
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)

    credentials.set_org_id(org_id)
    _save_credentials(obj, credentials)

    obj.console.print(f"[bold green]✓[/bold green] Default organization ID set to: {org_id}")


@org.command("get")
@click.pass_obj
def org_get(obj: CliContext):
    """Show the current default organization ID"""
    credentials = _load_credentials(obj)
    if credentials.org_id:
        obj.console.print(f"Default organization ID: {credentials.org_id}")
    else:
        obj.console.print("No default organization ID configured.")
        obj.console.print("Use 'hawkop org set <org-id>' to set one.")


@org.command("clear")
@click.pass_obj
def org_clear(obj: CliContext):
    """Clear the default organization ID"""
    credentials = _load_credentials(obj)
    if not credentials.org_id:
        obj.console.print("No default organization ID is currently set.")
        return

    credentials.set_org_id("")
    _save_credentials(obj, credentials)

    obj.console.print("[bold green]✓[/bold green] Default organization ID cleared.")


@org.command("list")
@format_option
@limit_option
@click.pass_obj
def org_list(obj: CliContext, output_format: str, limit: int):
    """List organizations you belong to"""
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)

    orgs = _call_api(obj, credentials, "list organizations", lambda c: c.list_organizations())
    orgs = apply_limit(orgs, limit)

    _emit(obj, output_format, orgs, organizations_table, "No organizations found.")


# ----------------------------------------------------------------------
# Users, teams, applications
# ----------------------------------------------------------------------

@cli.group()
def user():
    """Manage user-related operations"""
    pass


@user.command("list")
@format_option
@limit_option
@org_option
@click.option("--role", "-r", default=None, help="Filter by user role (admin|member|owner)")
@click.pass_obj
def user_list(obj: CliContext, output_format: str, limit: int, org: Optional[str], role: Optional[str]):
    """
    List users in an organization.

    Requires ADMIN or OWNER role in the organization.
    """
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)
    org_id = _resolve_org(obj, credentials, org)

    members = _call_api(
        obj, credentials, "list users", lambda c: c.list_organization_members(org_id)
    )
    members = apply_limit(filter_members_by_role(members, role), limit)

    _emit(obj, output_format, members, members_table, "No users found.")


@cli.group()
def team():
    """Manage team-related operations"""
    pass


@team.command("list")
@format_option
@limit_option
@org_option
@click.pass_obj
def team_list(obj: CliContext, output_format: str, limit: int, org: Optional[str]):
    """List teams in an organization"""
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)
    org_id = _resolve_org(obj, credentials, org)

    teams = _call_api(
        obj, credentials, "list teams", lambda c: c.list_organization_teams(org_id)
    )
    teams = apply_limit(teams, limit)

    _emit(obj, output_format, teams, teams_table, "No teams found.")


@cli.group()
def app():
    """Manage application-related operations"""
    pass


@app.command("list")
@format_option
@limit_option
@org_option
@click.option("--status", "-s", default=None, help="Filter by application status (ACTIVE|ENV_INCOMPLETE)")
@click.pass_obj
def app_list(obj: CliContext, output_format: str, limit: int, org: Optional[str], status: Optional[str]):
    """List applications in an organization"""
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)
    org_id = _resolve_org(obj, credentials, org)

    applications = _call_api(
        obj, credentials, "list applications",
        lambda c: c.list_organization_applications(org_id),
    )
    applications = apply_limit(filter_applications_by_status(applications, status), limit)

    _emit(obj, output_format, applications, applications_table, "No applications found.")


# ----------------------------------------------------------------------
# Scans
# ----------------------------------------------------------------------

@cli.group()
def scan():
    """Manage scan-related operations"""
    pass


@scan.command("list")
@format_option
@limit_option
@org_option
@click.option("--app", "-a", "app_filter", default=None, help="Filter by application name or ID")
@click.option("--env", "-e", default=None, help="Filter by environment")
@click.option("--status", "-s", default=None, help="Filter by scan status (STARTED|COMPLETED|ERROR)")
@click.option("--sort-by", default=DEFAULT_SORT_FIELD, show_default=True,
              help="Sort by field (timestamp|application|env|status)")
@click.option("--sort-dir", default=DEFAULT_SORT_DIR, show_default=True, help="Sort direction (asc|desc)")
@click.option("--page-size", default=0, type=int, help="Page size for API requests (default 1000, max 1000)")
@click.option("--page-token", default=None, help="Page token for pagination")
@click.pass_obj
def scan_list(
    obj: CliContext,
    output_format: str,
    limit: int,
    org: Optional[str],
    app_filter: Optional[str],
    env: Optional[str],
    status: Optional[str],
    sort_by: str,
    sort_dir: str,
    page_size: int,
    page_token: Optional[str],
):
    """
    List scans in an organization.

    Scans come back most recent first. Filters on application, environment
    and status are applied to the fetched page.

    Example:
        hawkop scan list --app billing --env production --limit 5
    """
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)
    org_id = _resolve_org(obj, credentials, org)

    # Sorting is only sent when it differs from the platform default
    options = PaginationOptions(
        page_size=page_size,
        page_token=page_token,
        sort_field=sort_by if sort_by and sort_by != DEFAULT_SORT_FIELD else None,
        sort_dir=sort_dir if sort_dir and sort_dir != DEFAULT_SORT_DIR else None,
    )

    results = _call_api(
        obj, credentials, "list scans",
        lambda c: c.list_organization_scans(org_id, options),
    )
    results = apply_limit(filter_scans(results, app=app_filter, env=env, status=status), limit)

    _emit(obj, output_format, results, scans_table, "No scans found.")


@scan.command("get")
@click.argument("scan_id")
@format_option
@org_option
@click.option(
    "--view", "-v",
    type=click.Choice(["overview", "stats"], case_sensitive=False),
    default="overview", show_default=True,
    help="View type",
)
@click.pass_obj
def scan_get(obj: CliContext, scan_id: str, output_format: str, org: Optional[str], view: str):
    """Get details for a specific scan"""
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)
    org_id = _resolve_org(obj, credentials, org)

    results = _call_api(
        obj, credentials, "get scan", lambda c: c.list_organization_scans(org_id)
    )
    result = find_scan(results, scan_id)
    if result is None:
        _fail(obj, f"Scan not found: {scan_id}")

    if output_format.lower() == "json":
        click.echo(to_json(result))
        return

    if view.lower() == "stats":
        table = scan_stats_table(result)
        if table is None:
            obj.console.print("No alert statistics available for this scan.")
            return
        obj.console.print(table)
    else:
        obj.console.print(scan_overview_table(result))


@scan.command("alerts")
@click.argument("scan_id")
@format_option
@limit_option
@click.option("--severity", "-s", default=None, help="Filter by severity (High|Medium|Low|Info)")
@click.pass_obj
def scan_alerts(obj: CliContext, scan_id: str, output_format: str, limit: int, severity: Optional[str]):
    """List security alerts for a specific scan"""
    credentials = _load_credentials(obj)
    _require_api_key(obj, credentials)

    alerts = _call_api(
        obj, credentials, "get scan alerts", lambda c: c.get_scan_alerts(scan_id)
    )
    alerts = apply_limit(filter_alerts_by_severity(alerts, severity), limit)

    _emit(obj, output_format, alerts, alerts_table, "No alerts found.")


if __name__ == "__main__":
    cli()
