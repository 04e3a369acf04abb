"""CLI for rendering and reconciling table definitions.

Provides commands for listing profiles, rendering DDL offline, and planning
or applying reconciliation against a live database.

Usage:
    sqlow profiles
    sqlow render --tables tables.toml --schema app
    DB_PROFILE=local sqlow plan --tables tables.toml --update
    DB_PROFILE=local sqlow apply --tables tables.toml --update --confirm

Commands:
    profiles  - List available profiles
    render    - Print CREATE TABLE statements (no database)
    plan      - Show what reconciliation would do (dry run)
    apply     - Reconcile the live schema with the definitions
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from sqlow.config.loader import load_db_config
from sqlow.errors import SqlowError
from sqlow.factory import ProfileNotFoundError, connect, get_active_profile_name
from sqlow.schema.context import SchemaContext
from sqlow.schema.definitions import DefinitionSet, load_table_specs
from sqlow.schema.models import ReconcileOutcome, ReconcileResult
from sqlow.schema.reconciler import SchemaReconciler

console = Console()

_OUTCOME_STYLES = {
    ReconcileOutcome.ADDED: "green",
    ReconcileOutcome.UNCHANGED: "dim",
    ReconcileOutcome.UPDATED: "yellow",
    ReconcileOutcome.FAILED: "bold red",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _tables_path(args: argparse.Namespace) -> Path:
    """Use ``--tables`` or fall back to ``[schema] file`` in db.toml."""
    if args.tables:
        return Path(args.tables)
    return Path(load_db_config().tables_file)


def _load_definitions(args: argparse.Namespace) -> DefinitionSet | None:
    try:
        return load_table_specs(_tables_path(args))
    except (FileNotFoundError, ValueError, SqlowError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return None


def _print_results(results: list[ReconcileResult], dry_run: bool) -> None:
    title = "Reconciliation Plan" if dry_run else "Reconciliation Results"
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Table")
    table.add_column("Action")
    table.add_column("Statements", justify="right")
    table.add_column("Details")

    for result in results:
        style = _OUTCOME_STYLES[result.outcome]
        details = ""
        if result.error is not None:
            details = escape(str(result.error))
        elif result.diff is not None and result.diff.has_changes:
            details = f"{result.diff.change_count} column change(s)"
        table.add_row(
            result.table,
            f"[{style}]{result.outcome.value}[/{style}]",
            str(len(result.statements)),
            details,
        )

    console.print(table)

    statements = [sql for result in results for sql in result.statements]
    if statements:
        console.print()
        for sql in statements:
            console.print(sql, markup=False, highlight=False, soft_wrap=True)


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_reconcile(args: argparse.Namespace, dry_run: bool) -> int:
    """Shared implementation for plan and apply.

    Args:
        args: Parsed arguments with env_prefix, tables, update, allow_drop.
        dry_run: Build statements without executing them.

    Returns:
        0 if every table reconciled, 1 otherwise.
    """
    env_prefix = getattr(args, "env_prefix", "")

    definitions = _load_definitions(args)
    if definitions is None:
        return 1

    allow_drop = getattr(args, "allow_drop", False)
    try:
        if not allow_drop and getattr(args, "update", False):
            allow_drop = load_db_config().allow_drop
    except (FileNotFoundError, ValueError):
        pass

    try:
        profile_name = get_active_profile_name(env_prefix)
        console.print(
            f"Connecting to profile: [bold cyan]{profile_name}[/bold cyan]",
            style="dim",
        )
        context: SchemaContext = await connect(profile_name=profile_name, env_prefix=env_prefix)
    except (ProfileNotFoundError, FileNotFoundError, ValueError, SqlowError) as e:
        console.print(f"[bold red]x[/bold red] {escape(str(e))}")
        return 1

    try:
        reconciler = SchemaReconciler(context)
        results = await reconciler.reconcile_all(
            definitions.tables,
            update=getattr(args, "update", False),
            renames=definitions.renames,
            allow_drop=allow_drop,
            dry_run=dry_run,
        )
    finally:
        await context.client.close()

    _print_results(results, dry_run)

    failed = [r for r in results if not r.success]
    if failed:
        console.print(f"\n[bold red]x[/bold red] {len(failed)} table(s) failed")
        return 1

    if dry_run:
        changes = sum(1 for r in results if r.outcome != ReconcileOutcome.UNCHANGED)
        if changes:
            console.print("\n[dim]Run[/dim] [cyan]sqlow apply --confirm[/cyan] [dim]to apply.[/dim]")
        else:
            console.print("\n[bold green]v[/bold green] Schema is up to date")
    else:
        console.print("\n[bold green]v[/bold green] Schema reconciled")
    return 0


# ============================================================================
# Sync command wrappers
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if db.toml not found.
    """
    try:
        config = load_db_config()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    try:
        current = get_active_profile_name(getattr(args, "env_prefix", ""))
    except ProfileNotFoundError:
        current = None

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Schema")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold green]*[/bold green]" if name == current else " "
        table.add_row(
            marker,
            f"[bold cyan]{name}[/bold cyan]" if name == current else name,
            profile.provider,
            profile.schema_name or "",
            profile.description or "",
        )

    console.print(table)

    if current:
        console.print("\n[bold green]*[/bold green] = active profile")

    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Print CREATE TABLE statements for the definitions file.

    Uses an offline context -- no database calls.

    Returns:
        0 on success, 1 if any table fails to render.
    """
    definitions = _load_definitions(args)
    if definitions is None:
        return 1

    try:
        context = SchemaContext.offline(args.schema)
    except SqlowError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    exit_code = 0
    for table in definitions.tables:
        try:
            ddl = table.render(context)
        except SqlowError as e:
            console.print(f"[red]Error in table {table.name}: {escape(str(e))}[/red]")
            exit_code = 1
            continue
        console.print(ddl, markup=False, highlight=False, soft_wrap=True)

    return exit_code


def cmd_plan(args: argparse.Namespace) -> int:
    """Show the reconciliation plan without executing anything.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_reconcile(args, dry_run=True))


def cmd_apply(args: argparse.Namespace) -> int:
    """Reconcile the live schema with the definitions.

    Without ``--confirm`` this only shows the plan.  Wraps the async
    implementation with ``asyncio.run()``.
    """
    if not args.confirm:
        console.print("[yellow]Dry run: pass --confirm to apply changes.[/yellow]")
        return asyncio.run(_async_reconcile(args, dry_run=True))
    return asyncio.run(_async_reconcile(args, dry_run=False))


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="sqlow",
        description="Declarative MySQL table definitions and schema reconciliation",
    )

    # Global options
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_DB_PROFILE)"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log executed statements and decisions",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    # render command
    p_render = subparsers.add_parser(
        "render",
        help="Print CREATE TABLE statements without connecting",
    )
    p_render.add_argument(
        "--tables",
        help="Path to table definitions TOML (default: [schema] file in db.toml)",
    )
    p_render.add_argument(
        "--schema",
        required=True,
        help="Schema (database) name to qualify tables with",
    )
    p_render.set_defaults(func=cmd_render)

    # plan and apply share their table options
    for name, func, help_text in (
        ("plan", cmd_plan, "Show what reconciliation would do (dry run)"),
        ("apply", cmd_apply, "Create or alter tables to match the definitions"),
    ):
        p_cmd = subparsers.add_parser(name, help=help_text)
        p_cmd.add_argument(
            "--tables",
            help="Path to table definitions TOML (default: [schema] file in db.toml)",
        )
        p_cmd.add_argument(
            "--update",
            action="store_true",
            help="Rename and alter existing tables instead of leaving them",
        )
        p_cmd.add_argument(
            "--allow-drop",
            action="store_true",
            help="Drop live columns missing from the definitions (with --update)",
        )
        if name == "apply":
            p_cmd.add_argument(
                "--confirm",
                action="store_true",
                help="Actually execute the statements",
            )
        p_cmd.set_defaults(func=func)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
