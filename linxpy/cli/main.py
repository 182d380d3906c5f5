"""linx CLI - upload files to a linx server and delete them again."""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

app = typer.Typer(
    name="linx",
    help="Upload files to a linx server",
    add_completion=False
)
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)]
    )


def fail(message: str, code: int = 1):
    """Print a one-line diagnostic and exit."""
    err_console.print(f"[red]{escape(message)}[/red]", soft_wrap=True)
    raise typer.Exit(code)


@app.command()
def linx(
    paths: Optional[List[str]] = typer.Argument(None, help="Files to upload, or URLs to delete with -d"),
    delete_key: Optional[str] = typer.Option(None, "--deletekey", help="The delete key to use for uploading or deleting a file"),
    delete_mode: bool = typer.Option(False, "-d", "--delete", help="Delete the specified files instead of uploading"),
    ttl: int = typer.Option(0, "--ttl", min=0, help="Time to live; the length of time in seconds before the file expires"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="The path to the config file"),
    server: Optional[str] = typer.Option(None, "--server", help="URL to a linx server"),
    proxy: Optional[str] = typer.Option(None, "--proxy", help="URL of proxy used to access the server"),
    upload_log: Optional[Path] = typer.Option(None, "--uploadlog", help="Path to the upload log file"),
    api_key: Optional[str] = typer.Option(None, "--apikey", help="API key for servers that require one"),
    collection: bool = typer.Option(False, "--collection", help="Create a collection when uploading multiple files"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show debug logging"),
):
    """Upload files to a linx server, or delete them with -d."""
    from linxpy.core.api import TransferClient, load_config, default_config_path
    from linxpy.core.exceptions import LinxException
    from linxpy.core.upload import UploadOrchestrator

    configure_logging(verbose)

    if not paths:
        fail("No files given" if not delete_mode else "No URLs given", code=2)

    if config_path is None:
        config_path = default_config_path()
        if not config_path.exists():
            config_path = None

    try:
        config = load_config(
            config_path,
            server=server,
            proxy=proxy,
            api_key=api_key,
            upload_log=upload_log,
        )
    except LinxException as e:
        fail(str(e))

    async def do_run():
        async with TransferClient(config) as client:
            orchestrator = UploadOrchestrator(config, client, console=console)

            if delete_mode:
                await orchestrator.delete_urls(paths, delete_key)
            else:
                await orchestrator.upload_files(
                    paths,
                    ttl=ttl,
                    delete_key=delete_key,
                    collection=collection
                )

    try:
        run_async(do_run())
    except LinxException as e:
        fail(str(e))


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
