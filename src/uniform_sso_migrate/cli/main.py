"""Main CLI entry point for the Uniform SSO migration tool."""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config.config import Config, MigrationOptions
from ..migration.engine import MigrationEngine
from ..migration.results import MigrationSummary, RestoreSummary
from ..utils.logging import setup_logging

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.uniform-sso-migrate.yaml']


@click.group()
@click.version_option(version=__version__, prog_name='uniform-sso-migrate')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """Uniform SSO Migration Tool - Move team members from email accounts to SSO."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Setup basic logging first (will be enhanced later with config)
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
def init(output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]Uniform SSO Migration Tool[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your API URL and team keys[/yellow]'
        )

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)


@cli.command()
@click.option('--teams-file', help='JSON file with {teamId, apiKey} entries')
@click.option(
    '--mark-obsolete/--no-mark-obsolete',
    default=None,
    help='Rename existing email-based accounts to "OBSOLETE - <name>"',
)
@click.option(
    '--delete-members/--no-delete-members',
    default=None,
    help='Delete existing members instead of marking them as obsolete',
)
@click.option(
    '--backup/--no-backup',
    default=None,
    help='Back up team members before migration',
)
@click.option('--backup-dir', help='Directory to store backups')
@click.option(
    '--dry-run/--no-dry-run',
    default=None,
    help='Run without making actual changes',
)
@click.option(
    '--ignore-emails',
    help='Comma-separated list of additional emails to ignore',
)
@click.option(
    '--restore-from',
    type=click.Path(),
    help='Restore members from a backup file instead of migrating',
)
@click.pass_context
def migrate(ctx: click.Context, restore_from: Optional[str], **overrides: Any) -> None:
    """Migrate team members to SSO invitations."""
    config = _prepare(ctx, overrides, 'Starting migration process...', 'blue')

    restore_from = restore_from or config.migration.restore_from
    if restore_from:
        _run_restore(ctx, config, restore_from)
    else:
        _run_migration(ctx, config)


@cli.command()
@click.argument('backup_file', type=click.Path())
@click.option('--teams-file', help='JSON file with {teamId, apiKey} entries')
@click.option(
    '--dry-run/--no-dry-run',
    default=None,
    help='Only load the backup without sending invitations',
)
@click.option(
    '--ignore-emails',
    help='Comma-separated list of additional emails to ignore',
)
@click.pass_context
def restore(ctx: click.Context, backup_file: str, **overrides: Any) -> None:
    """Re-invite the members of BACKUP_FILE into every configured team."""
    config = _prepare(ctx, overrides, 'Starting restore process...', 'cyan')
    _run_restore(ctx, config, backup_file)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    console.print(
        Panel.fit(
            '[bold magenta]Uniform SSO Migration Tool[/bold magenta]\n'
            'Configuration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)
        teams = config.resolve_teams()
        options = config.migration

        table = Table(title='Migration Configuration')
        table.add_column('Setting', style='cyan')
        table.add_column('Value', style='green')

        table.add_row('API URL', config.api.url)
        table.add_row(
            'Teams',
            ', '.join(f'{team.team_id} ({team.masked_key})' for team in teams),
        )
        table.add_row('Action', options.action.value)
        table.add_row('Dry Run', '✓' if options.dry_run else '✗')
        table.add_row('Backup', '✓' if options.backup.enabled else '✗')
        table.add_row('Backup Directory', options.backup.directory)
        table.add_row('Ignored Emails', ', '.join(options.ignored_emails) or 'None')
        if options.restore_from:
            table.add_row('Restore From', options.restore_from)

        console.print(table)

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


def _prepare(
    ctx: click.Context, overrides: Dict[str, Any], message: str, color: str
) -> Config:
    """Print the banner and load the configuration with CLI overrides."""
    console.print(
        Panel.fit(
            f'[bold {color}]Uniform SSO Migration Tool[/bold {color}]\n{message}',
            border_style=color,
        )
    )

    try:
        config = _load_config(ctx)
        config = _apply_overrides(config, **overrides)
        _setup_logging_with_config(ctx, config)
        ctx.obj['teams'] = config.resolve_teams()
    except Exception as e:
        console.print(f'[red]✗[/red] Configuration error: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)

    if config.migration.dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )
    return config


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from file or environment."""
    config_path = ctx.obj.get('config_path')

    if config_path:
        if not Path(config_path).exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')
        return Config.from_file(config_path)

    for path in DEFAULT_CONFIG_PATHS:
        if Path(path).exists():
            return Config.from_file(path)

    # Fall back to environment variables
    try:
        return Config.from_env()
    except Exception as e:
        raise FileNotFoundError(
            'No configuration found. Use --config to specify a file, set '
            'UNIFORM_API_URL in the environment or run "uniform-sso-migrate init" '
            f'to create one. ({e})'
        )


def _apply_overrides(
    config: Config,
    teams_file: Optional[str] = None,
    mark_obsolete: Optional[bool] = None,
    delete_members: Optional[bool] = None,
    backup: Optional[bool] = None,
    backup_dir: Optional[str] = None,
    dry_run: Optional[bool] = None,
    ignore_emails: Optional[str] = None,
) -> Config:
    """Return a copy of ``config`` with command-line values applied."""
    options = config.migration.model_dump()

    for key, value in (
        ('mark_obsolete', mark_obsolete),
        ('delete_members', delete_members),
        ('dry_run', dry_run),
    ):
        if value is not None:
            options[key] = value

    if backup is not None:
        options['backup']['enabled'] = backup
    if backup_dir:
        options['backup']['directory'] = backup_dir
    if ignore_emails:
        options['ignored_emails'] += [
            email.strip() for email in ignore_emails.split(',') if email.strip()
        ]

    # Re-validate so the ignore list is normalized again after merging
    updates: Dict[str, Any] = {'migration': MigrationOptions(**options)}
    if teams_file:
        updates['teams_file'] = teams_file

    return config.model_copy(update=updates)


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)
    log_level = 'DEBUG' if verbose else config.logging.level

    setup_logging(
        level=log_level,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )


def _print_team_start(team) -> None:
    console.print(f'[blue]→[/blue] Processing team {team.team_id}')


def _run_migration(ctx: click.Context, config: Config) -> None:
    """Run the migration and display the summary."""
    try:
        engine = MigrationEngine(config)
        summary = engine.migrate(ctx.obj['teams'], on_team_start=_print_team_start)
    except Exception as e:
        console.print(f'[red]✗[/red] Migration failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)

    _display_migration_summary(summary)
    _print_dry_run_notice(config)


def _run_restore(ctx: click.Context, config: Config, backup_file: str) -> None:
    """Run the restore and display the summary."""
    try:
        engine = MigrationEngine(config)
        summary = engine.restore(
            backup_file, ctx.obj['teams'], on_team_start=_print_team_start
        )
    except Exception as e:
        console.print(f'[red]✗[/red] Restore failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)

    _display_restore_summary(summary)
    _print_dry_run_notice(config)


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('Team', style='cyan')
    table.add_column('Found', style='blue')
    table.add_column('Skipped', style='yellow')
    table.add_column('Obsolete', style='magenta')
    table.add_column('Deleted', style='magenta')
    table.add_column('Invited', style='green')
    table.add_column('Backup', style='blue')
    table.add_column('Errors', style='red')

    for result in summary.results:
        table.add_row(
            result.team_id,
            str(result.members_found),
            str(result.skipped_members),
            str(result.members_marked_obsolete),
            str(result.members_deleted),
            str(result.invitations_sent),
            'Yes' if result.backup_created else 'No',
            str(len(result.errors)),
        )

    table.add_section()
    table.add_row(
        'Total',
        str(summary.members_found),
        str(summary.skipped_members),
        str(summary.members_marked_obsolete),
        str(summary.members_deleted),
        str(summary.invitations_sent),
        str(summary.backups_created),
        str(summary.errors),
        style='bold',
    )
    console.print(table)

    for result in summary.results:
        if result.backup_path:
            console.print(
                f'[blue]Backup for team {result.team_id}:[/blue] {result.backup_path}'
            )
        _print_errors(result.team_id, result.errors)


def _display_restore_summary(summary: RestoreSummary) -> None:
    """Display restore summary results."""
    table = Table(title='Restore Summary')
    table.add_column('Team', style='cyan')
    table.add_column('Restored', style='green')
    table.add_column('Success', style='blue')
    table.add_column('Errors', style='red')

    for result in summary.results:
        table.add_row(
            result.team_id,
            str(result.members_restored),
            '✓' if result.success else '✗',
            str(len(result.errors)),
        )

    table.add_section()
    table.add_row(
        'Total', str(summary.members_restored), '', str(summary.errors), style='bold'
    )
    console.print(table)

    for result in summary.results:
        _print_errors(result.team_id, result.errors)


def _print_errors(team_id: str, errors) -> None:
    if not errors:
        return

    console.print(f'\n[red]Errors for team {team_id} ({len(errors)}):[/red]')
    for index, error in enumerate(errors, start=1):
        console.print(f'  {index}. {error}', markup=False)


def _print_dry_run_notice(config: Config) -> None:
    if config.migration.dry_run:
        console.print(
            '\n[yellow]This was a DRY RUN. No actual changes were made.[/yellow]'
        )
        console.print('To make actual changes, run with --no-dry-run option.')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)
    except Exception as e:
        console.print(f'[red]Error: {e}[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
