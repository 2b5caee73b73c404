"""repofs CLI - browse a remote repository without cloning it."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from repofs.api import browse
from repofs.api.session import repository_session
from repofs.drivers.vfs.remote_tree import RemoteTreeProvider
from repofs.kernel.config.loader import load_config
from repofs.kernel.config.models import RepoFSConfig
from repofs.kernel.domain.vfs import EntryType
from repofs.kernel.exceptions import (
    ConfigurationError,
    FileSystemError,
    RemoteUnavailableError,
)
from repofs.kernel.logging import configure_logging

EXIT_REMOTE_ERROR = 1
EXIT_NOT_FOUND = 2

app = typer.Typer(
    name="repofs",
    help="Browse a hosted source repository through a lazily populated file tree.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


def _report_remote_error(error: RemoteUnavailableError) -> None:
    err_console.print(f"[red]Remote request failed: {escape(error.message)}[/red]")


def _settings(ctx: typer.Context) -> dict[str, Any]:
    if ctx.obj is None:
        ctx.obj = {}
    return ctx.obj


def _run(
    ctx: typer.Context, repo_url: str, action: Callable[[RemoteTreeProvider], Awaitable[T]]
) -> T:
    """Open a session, run ``action`` and map failures to exit codes."""
    settings = _settings(ctx)
    config: RepoFSConfig | None = settings.get("config")

    async def session() -> T:
        async with repository_session(
            repo_url, config=config, error_reporter=_report_remote_error
        ) as provider:
            return await action(provider)

    try:
        return asyncio.run(session())
    except RemoteUnavailableError:
        # already reported
        raise typer.Exit(EXIT_REMOTE_ERROR) from None
    except ConfigurationError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_REMOTE_ERROR) from None
    except FileSystemError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_NOT_FOUND) from None


def _print_json(ctx: typer.Context, obj: Any) -> bool:
    if _settings(ctx).get("output_format") != "json":
        return False
    typer.echo(json.dumps(obj, default=str, indent=2))
    return True


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Path to repofs.toml or pyproject.toml"
    ),
    json_out: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """repofs - lazy, read-only view of a remote repository.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    settings = _settings(ctx)
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigurationError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_REMOTE_ERROR) from None

    level = (log_level or config.logging.level).upper()
    configure_logging(
        level=level,  # type: ignore[arg-type]
        format=config.logging.format,
        output_file=config.logging.output_file,
        use_color=config.logging.use_color,
        enable_stdlib_bridge=level == "DEBUG",
    )

    settings.update({
        "config": config,
        "output_format": "json" if json_out else "pretty",
    })


@app.command("ls")
def list_directory(
    ctx: typer.Context,
    repo_url: str = typer.Argument(..., help="Repository URL, e.g. https://github.com/owner/repo"),
    path: str = typer.Argument("/", help="Directory inside the repository"),
) -> None:
    """List a directory."""
    entries = _run(ctx, repo_url, lambda provider: browse.list_path(provider, path))
    if _print_json(ctx, entries):
        return

    table = Table(title=f"{repo_url} {path}")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    for entry in entries:
        suffix = "/" if entry["type"] == EntryType.DIRECTORY else ""
        table.add_row(escape(entry["name"] + suffix), str(entry["type"]))
    console.print(table)


@app.command("cat")
def cat_file(
    ctx: typer.Context,
    repo_url: str = typer.Argument(..., help="Repository URL"),
    path: str = typer.Argument(..., help="File inside the repository"),
) -> None:
    """Print a file's content."""
    content = _run(ctx, repo_url, lambda provider: browse.read_path(provider, path))
    typer.echo(content, nl=False)


@app.command("stat")
def stat_entry(
    ctx: typer.Context,
    repo_url: str = typer.Argument(..., help="Repository URL"),
    path: str = typer.Argument(..., help="File or directory inside the repository"),
) -> None:
    """Show cached metadata for a path."""
    info = _run(ctx, repo_url, lambda provider: browse.stat_path(provider, path))
    if _print_json(ctx, info):
        return

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in info.items():
        table.add_row(key, escape(str(value)))
    console.print(table)


@app.command("tree")
def show_tree(
    ctx: typer.Context,
    repo_url: str = typer.Argument(..., help="Repository URL"),
    path: str = typer.Argument("/", help="Directory to start from"),
    depth: int = typer.Option(2, "--depth", "-d", min=1, help="Levels to descend"),
) -> None:
    """Show a directory tree, listing directories down to --depth."""

    async def collect(provider: RemoteTreeProvider) -> list[tuple[int, str, EntryType]]:
        return [item async for item in browse.walk(provider, path, max_depth=depth)]

    items = _run(ctx, repo_url, collect)
    if _print_json(ctx, [{"depth": d, "path": p, "type": k} for d, p, k in items]):
        return

    root = Tree(f"[bold]{escape(path)}[/bold]")
    branches: list[Tree] = [root]
    for level, item_path, kind in items:
        del branches[level + 1 :]
        name = escape(item_path.rsplit("/", 1)[-1])
        label = f"[cyan]{name}/[/cyan]" if kind == EntryType.DIRECTORY else name
        branches.append(branches[level].add(label))
    console.print(root)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
