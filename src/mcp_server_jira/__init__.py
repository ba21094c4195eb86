import click
from pathlib import Path
from .server import serve


@click.command()
@click.option(
    "--project-dir",
    "-p",
    type=Path,
    help="Directory holding the .env file with JIRA_* settings",
)
@click.option("-v", "--verbose", count=True)
def main(project_dir: Path | None, verbose: int) -> None:
    """MCP Jira Server - Jira issue operations for MCP"""
    import asyncio
    import os

    if verbose == 1:
        os.environ["LOG_LEVEL"] = "INFO"
    elif verbose >= 2:
        os.environ["LOG_LEVEL"] = "DEBUG"

    asyncio.run(serve(project_dir))


if __name__ == "__main__":
    main()
