"""CLI for uploading local files and folders to a GitHub repository."""

import asyncio
import logging
from pathlib import Path

import click

from clients.github import RepositoryGateway, normalize_config
from clients.relay_client import RelayClient
from config import (
    CLI_COMMIT_MESSAGE,
    DEFAULT_BRANCH,
    GITHUB_API_URL,
    HOST,
    HTTP_TIMEOUT,
    HTTP_VERIFY,
    PORT,
    REPO_READY_INTERVAL,
    REPO_READY_TIMEOUT,
    timeout_or_none,
)
from core.errors import ConfigurationError, UploaderError
from core.models import BatchSummary, UploadConfig, UploadResult
from sources.local_source import LocalSource
from upload.batch import walk
from upload.session import UploadSession, run_session

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def echo_result(result: UploadResult) -> None:
    if result.success:
        click.echo(f"✓ {result.path}")
    else:
        click.echo(f"✗ {result.path}: {result.error}", err=True)


class HelpOnUnknownGroup(click.Group):
    """Print the help text instead of an error for missing or unrecognized commands."""

    def parse_args(self, ctx, args):
        if not args:
            click.echo(ctx.get_help())
            ctx.exit(0)
        return super().parse_args(ctx, args)

    def resolve_command(self, ctx, args):
        name = args[0] if args else None
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            click.echo(ctx.get_help())
            ctx.exit(0)
        return super().resolve_command(ctx, args)


# ============ CLI Group ============

@click.group(cls=HelpOnUnknownGroup)
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
def cli(verbose: int) -> None:
    """Upload files and folders to a GitHub repository."""
    setup_logging(verbose)


# ============ Upload Command ============

async def _upload_direct(config: UploadConfig, target: Path) -> BatchSummary:
    gateway = RepositoryGateway(
        config.token,
        base_url=GITHUB_API_URL,
        timeout=timeout_or_none(HTTP_TIMEOUT),
        verify=HTTP_VERIFY,
    )
    return await walk(config, target, gateway=gateway, on_result=echo_result)


async def _upload_via_relay(
    config: UploadConfig,
    target: Path,
    relay_url: str,
    *,
    create_repo: bool,
    visibility: str,
) -> BatchSummary:
    entries = await LocalSource(root=target).list_entries()
    session = UploadSession(
        config=config,
        visibility="public" if visibility == "public" else "private",
        auto_create=create_repo,
        entries=entries,
    )
    return await run_session(
        session,
        RelayClient(relay_url),
        ready_timeout=REPO_READY_TIMEOUT,
        ready_interval=REPO_READY_INTERVAL,
        on_result=echo_result,
    )


@cli.command()
@click.argument("target", required=False)
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub personal access token (or GITHUB_TOKEN)")
@click.option("--username", envvar=["GITHUB_USERNAME", "USERNAME"], help="Repository owner (or GITHUB_USERNAME / USERNAME)")
@click.option("--repo", envvar="REPO_NAME", help="Repository name (or REPO_NAME)")
@click.option("--branch", envvar="BRANCH", default=DEFAULT_BRANCH, show_default=True, help="Target branch (or BRANCH)")
@click.option("--message", default=CLI_COMMIT_MESSAGE, show_default=True, help="Commit message")
@click.option("--path", "target_path", default="", help="Target path inside the repository")
@click.option("--relay", "relay_url", help="Upload through a running relay server at this URL")
@click.option("--create-repo", is_flag=True, help="With --relay: create the repository if it is missing")
@click.option(
    "--visibility",
    type=click.Choice(["private", "public"]),
    default="private",
    show_default=True,
    help="With --create-repo: visibility of the new repository",
)
def upload(target, token, username, repo, branch, message, target_path, relay_url, create_repo, visibility):
    """Upload a file or a folder (recursively) to GitHub."""
    if not target:
        click.echo("Error: Please specify a file or folder to upload", err=True)
        raise SystemExit(1)

    try:
        config = normalize_config(
            UploadConfig(
                token=token or "",
                owner=username or "",
                repo=repo or "",
                branch=branch,
                message=message,
                target_path=target_path,
            )
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Set them via --flags or in .env file", err=True)
        raise SystemExit(1)

    target_p = Path(target).resolve()
    if not target_p.exists():
        click.echo(f"Error: {target} does not exist", err=True)
        raise SystemExit(1)

    click.echo(f"📤 Uploading to {config.full_name}:{config.branch}")
    click.echo(f"📝 Message: {config.message}")
    click.echo()

    try:
        if relay_url:
            summary = asyncio.run(
                _upload_via_relay(config, target_p, relay_url, create_repo=create_repo, visibility=visibility)
            )
        else:
            summary = asyncio.run(_upload_direct(config, target_p))
    except UploaderError as e:
        logger.debug("Upload aborted", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except Exception as e:
        logger.exception("Unexpected failure")
        click.echo(f"Fatal error: {e}", err=True)
        raise SystemExit(1)

    click.echo()
    if target_p.is_dir():
        click.echo(f"✅ Upload complete: {summary.success_count} succeeded, {summary.failed_count} failed")
    else:
        click.echo("✅ Upload complete!" if summary.failed_count == 0 else "❌ Upload failed")

    if summary.failed_count:
        raise SystemExit(1)


# ============ Serve Command ============

@cli.command()
@click.option("--host", default=HOST, show_default=True)
@click.option("--port", type=int, default=PORT, show_default=True)
def serve(host, port):
    """Run the relay server and the drag-and-drop page."""
    from server.server import main as run_server

    run_server(host=host, port=port)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
