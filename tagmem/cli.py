"""
CLI interface for tagmem.

Usage:
    tagmem                                   # run the MCP stdio server
    tagmem -g ~/mem/global -l ./mem mcp      # same, with explicit roots
    tagmem remember dev "Uses eslint" -t tools --global
    tagmem recall dev --global
    tagmem forget dev --match eslint --global
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .config import (
    GLOBAL_STORAGE_ENV,
    LOCAL_STORAGE_ENV,
    MemoryConfig,
    initialize_storage,
    is_under_home,
    load_memory_config,
)
from .errors import tagmem_home
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .store import MemoryStore, area_name

ALL_CATEGORIES = "*"


# Set TAGMEM_VERBOSE=1 to enable debug mode via environment
if os.environ.get("TAGMEM_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"tagmem {version('tagmem')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_global_storage: Optional[Path] = None
_local_storage: Optional[Path] = None
_persistence: Optional[bool] = None


def _get_config() -> MemoryConfig:
    return load_memory_config(
        global_storage=_global_storage,
        local_storage=_local_storage,
        enable_persistence=_persistence,
    )


def _get_store() -> MemoryStore:
    config = _get_config()
    return MemoryStore(config.global_storage, config.local_storage)


app = typer.Typer(
    name="tagmem",
    help="Categorized, tagged memory for AI assistants.",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode=None,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    global_storage: Annotated[Optional[Path], typer.Option(
        "--global-storage", "-g",
        envvar=GLOBAL_STORAGE_ENV,
        help="Directory for global memories (default: ~/.config/goose/memory)",
    )] = None,
    local_storage: Annotated[Optional[Path], typer.Option(
        "--local-storage", "-l",
        envvar=LOCAL_STORAGE_ENV,
        help="Directory for local memories (default: ./.goose/memory)",
    )] = None,
    persistence: Annotated[Optional[bool], typer.Option(
        "--persistence/--no-persistence",
        help="Create storage directories at startup",
        show_default=False,
    )] = None,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
):
    """Categorized, tagged memory for AI assistants."""
    global _global_storage, _local_storage, _persistence
    _global_storage = global_storage
    _local_storage = local_storage
    _persistence = persistence

    # No subcommand: behave like the server binary
    if ctx.invoked_subcommand is None:
        _run_server()


# -----------------------------------------------------------------------------
# Common Options
# -----------------------------------------------------------------------------

GlobalFlag = Annotated[
    bool,
    typer.Option(
        "--global", "-G",
        help="Use the global area instead of the local one",
    )
]


def _run_server() -> None:
    config = _get_config()
    configure_ops_log(tagmem_home())
    for label, root in (("global", config.global_storage), ("local", config.local_storage)):
        hint = " (under home)" if is_under_home(root) else ""
        typer.echo(f"tagmem: {label} storage {root}{hint}", err=True)
    from .mcp import main as mcp_main
    mcp_main(config)


@app.command()
def mcp():
    """Start MCP stdio server for AI agent integration."""
    _run_server()


@app.command()
def remember(
    category: Annotated[str, typer.Argument(help="Category to store the memory in")],
    text: Annotated[str, typer.Argument(help="Memory text")],
    tags: Annotated[Optional[list[str]], typer.Option(
        "--tag", "-t",
        help="Tag to apply (repeatable)",
    )] = None,
    is_global: GlobalFlag = False,
):
    """Store a memory."""
    if not text.strip():
        typer.echo("Error: memory text must not be empty", err=True)
        raise typer.Exit(1)
    config = _get_config()
    initialize_storage(config)
    store = MemoryStore(config.global_storage, config.local_storage)
    store.remember(category, text, tags or [], is_global)
    typer.echo(f"Stored memory in category: {category}")


@app.command()
def recall(
    category: Annotated[str, typer.Argument(
        help="Category to show, or '*' for all categories",
    )] = ALL_CATEGORIES,
    is_global: GlobalFlag = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
    )] = False,
):
    """Show stored memories."""
    store = _get_store()
    if category == ALL_CATEGORIES:
        memories = store.retrieve_all(is_global)
        heading = "Category"
    else:
        memories = store.retrieve(category, is_global)
        heading = "Tags"

    if output_json:
        typer.echo(json.dumps(memories, indent=2, ensure_ascii=False))
        return

    if not memories:
        typer.echo(f"No {area_name(is_global)} memories found.")
        return

    for key, entries in memories.items():
        typer.echo(f"{heading}: {key}")
        for entry in entries:
            typer.echo(f"  - {entry}")


@app.command()
def forget(
    category: Annotated[str, typer.Argument(
        help="Category to remove from, or '*' for every category",
    )],
    match: Annotated[Optional[str], typer.Option(
        "--match", "-m",
        help="Only remove memories containing this text",
    )] = None,
    is_global: GlobalFlag = False,
):
    """Remove memories."""
    store = _get_store()
    if match is not None:
        if category == ALL_CATEGORIES or not match:
            typer.echo("Error: --match needs a single category and non-empty text", err=True)
            raise typer.Exit(1)
        store.remove_specific_memory(category, match, is_global)
        typer.echo(f"Removed specific memory from category: {category}")
    elif category == ALL_CATEGORIES:
        store.clear_all(is_global)
        typer.echo(f"Cleared all {area_name(is_global)} memory categories")
    else:
        store.clear_memory(category, is_global)
        typer.echo(f"Cleared memories in category: {category}")


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="tagmem CLI")
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
