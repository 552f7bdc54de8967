"""
Main CLI entry point for Styled Sort
"""

import logging
import sys
from pathlib import Path

import click

from styled_sort import __version__
from styled_sort.commands.check import CheckCommand
from styled_sort.core.backup_manager import BackupManager
from styled_sort.core.config import Config

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(
    version=__version__,
    prog_name="styled-sort",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress output",
)
@click.pass_context
def cli(
    ctx,
    config: str | None,
    verbose: bool,
    quiet: bool,
):
    """Keep styled-component declarations in the order they are used

    Reports styled declarations that appear before the declarations they
    should follow, based on where each one is first used as a JSX tag and on
    the declarations each one interpolates.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    ctx.ensure_object(dict)

    # Load configuration
    if config:
        ctx.obj["config"] = Config.from_file(Path(config))
    else:
        ctx.obj["config"] = Config.load_hierarchy(Path.cwd())

    # Apply CLI flags
    if verbose or ctx.obj["config"].verbose:
        ctx.obj["config"].verbose = True
        logging.getLogger().setLevel(logging.DEBUG)

    if quiet:
        ctx.obj["config"].quiet = True
        logging.getLogger().setLevel(logging.WARNING)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Process directories recursively",
)
@click.option(
    "--fix",
    is_flag=True,
    help="Move misplaced declarations",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Compute fixes without writing files",
)
@click.option(
    "--no-backup",
    is_flag=True,
    help="Skip creating backup files",
)
@click.option(
    "--ast",
    "ast_file",
    type=click.Path(exists=True),
    help="ESTree JSON dump of PATH (single file only)",
)
@click.pass_context
def check(
    ctx,
    path: str,
    recursive: bool,
    fix: bool,
    dry_run: bool,
    no_backup: bool,
    ast_file: str | None,
):
    """Check styled declaration order

    Every source file needs an ESTree dump, either next to it
    (Button.jsx.estree.json), passed with --ast, or produced by the
    parser.command configured in .styled-sort.yaml.

    Examples:
        styled-sort check ./src -r
        styled-sort check ./src/Button.jsx --ast Button.json
        styled-sort check ./src -r --fix
    """
    config = ctx.obj["config"]
    config.dry_run = dry_run or config.dry_run
    if no_backup:
        config.backup.enabled = False

    errors = config.validate()
    if errors:
        for error in errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(2)

    command = CheckCommand(config)
    result = command.execute(
        Path(path),
        recursive=recursive,
        fix=fix,
        ast_path=Path(ast_file) if ast_file else None,
    )

    sys.exit(0 if result.is_clean else 1)


@cli.command()
@click.pass_context
def init(ctx):
    """Initialize configuration in current directory

    Creates a default .styled-sort.yaml configuration file in the current
    directory.
    """
    config_path = Path.cwd() / ".styled-sort.yaml"

    if config_path.exists():
        click.confirm(f"{config_path} already exists. Overwrite?", abort=True)

    Config().save(config_path)

    click.echo(f"Created configuration file: {config_path}")
    click.echo("Edit this file to customize your settings.")


@cli.command()
@click.option(
    "--sessions",
    is_flag=True,
    help="List backup sessions",
)
@click.option(
    "--restore",
    help="Restore from backup session ID",
)
@click.option(
    "--clean",
    is_flag=True,
    help="Clean old backup sessions",
)
@click.pass_context
def backup(
    ctx,
    sessions: bool,
    restore: str | None,
    clean: bool,
):
    """Manage backup sessions created by --fix"""
    config = ctx.obj["config"]

    manager = BackupManager(
        backup_dir=config.backup.directory,
        compression=config.backup.compression,
        keep_sessions=config.backup.keep_sessions,
    )

    if sessions:
        all_sessions = manager.list_sessions()
        if not all_sessions:
            click.echo("No backup sessions found.")
        else:
            click.echo(f"Found {len(all_sessions)} backup sessions:")
            for session in all_sessions:
                click.echo(f"  - {session['session_id']} ({session['timestamp']})")
                if "files" in session:
                    click.echo(f"    Files: {len(session['files'])}")

    elif restore:
        click.confirm(f"Restore all files from session {restore}?", abort=True)
        if manager.restore_session(restore):
            click.echo(f"Successfully restored session: {restore}")
        else:
            click.echo(f"Failed to restore session: {restore}", err=True)
            sys.exit(1)

    elif clean:
        click.confirm(
            f"Remove backup sessions older than {config.backup.keep_sessions} most recent?",
            abort=True,
        )
        removed = manager.cleanup_old_sessions()
        click.echo(f"Removed {removed} old backup sessions.")

    else:
        click.echo("Use --sessions, --restore, or --clean")


def main():
    """Main entry point"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
