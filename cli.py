import asyncio
from pathlib import Path
from typing import Annotated, Any, Dict

import typer
from mcp.shared.exceptions import McpError
from rich.console import Console

from config import load_configuration
from mcp_servers.merge_review_server import serve
from mcp_servers.merge_review_tools import MergeReviewTools
from utils.io.logger import logger

console = Console()
app = typer.Typer(context_settings={"help_option_names": ["-h", "--help"]})


def _run_tool(name: str, arguments: Dict[str, Any]) -> None:
    """Invoke a tool locally and print its JSON payload."""
    try:
        content = MergeReviewTools().call_tool(name, arguments)
    except McpError as e:
        console.print(f"[bold red]Error:[/bold red] {e.error.message}")
        raise typer.Exit(code=1)

    for item in content:
        console.print_json(item.text)


@app.callback()
def main(
    env_file: Annotated[
        Path | None,
        typer.Option(
            "--env-file",
            "-e",
            help="Explicit path to a .env file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
) -> None:
    """
    Merge Review: inspect pending branch changes before a merge.
    """
    load_configuration(env_file=str(env_file) if env_file else None)
    logger.setup()


@app.command("serve")
def serve_command() -> None:
    """
    Run the MCP server over stdio.
    """
    asyncio.run(serve())


@app.command("merge-diff")
def merge_diff(
    repo_path: Annotated[str, typer.Argument(help="Path to the git repository")],
    from_branch: str | None = typer.Option(None, "--from", help="Branch to compare from"),
    to_branch: str | None = typer.Option(None, "--to", help="Branch to compare to"),
) -> None:
    """
    Show files, line stats and commits between two branches.

    Examples:
        merge-review merge-diff .                  # default branch vs current branch
        merge-review merge-diff . --from develop   # develop vs current branch
    """
    _run_tool(
        "show_merge_diff",
        {"repoPath": repo_path, "fromBranch": from_branch, "toBranch": to_branch},
    )


@app.command()
def summary(
    repo_path: Annotated[str, typer.Argument(help="Path to the git repository")],
    branch: str | None = typer.Option(None, "--branch", "-b", help="Branch to analyze"),
) -> None:
    """
    Show how far a branch is ahead of or behind the default branch.
    """
    _run_tool("quick_merge_summary", {"repoPath": repo_path, "branch": branch})


@app.command("file-diff")
def file_diff(
    repo_path: Annotated[str, typer.Argument(help="Path to the git repository")],
    filename: Annotated[str, typer.Argument(help="File path relative to the repository root")],
    from_branch: str | None = typer.Option(None, "--from", help="Branch to compare from"),
    to_branch: str | None = typer.Option(None, "--to", help="Branch to compare to"),
    no_raw: bool = typer.Option(False, "--no-raw", help="Omit the raw diff lines"),
) -> None:
    """
    Show added and removed lines of one file between two branches.
    """
    _run_tool(
        "show_file_diff",
        {
            "repoPath": repo_path,
            "filename": filename,
            "fromBranch": from_branch,
            "toBranch": to_branch,
            "includeRawDiff": not no_raw,
        },
    )


if __name__ == "__main__":
    app()
