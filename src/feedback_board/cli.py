"""Command-line interface for the Feedback Board."""

import asyncio
import platform
from typing import Optional

import typer
from loguru import logger
from typing_extensions import Annotated

from feedback_board.api.client import TrackerClient
from feedback_board.config import Settings, get_settings
from feedback_board.exceptions import AlreadyVoted, FeedbackError
from feedback_board.models.record import Category, ReactionKind, RecordFilter
from feedback_board.services.feedback_service import FeedbackService
from feedback_board.services.record_store import RecordStore
from feedback_board.storage.ledger_storage import JsonFileLedgerStorage
from feedback_board.storage.vote_ledger import VoteLedger
from feedback_board.utils.logging import setup_logging

app = typer.Typer(help="Feedback Board - Collect and vote on bug reports and feature requests")

ledger_app = typer.Typer(help="Inspect or reset the local vote ledger")
app.add_typer(ledger_app, name="ledger")


def default_device_info() -> str:
    """Summarize the host the same way the mobile client reports devices."""
    return (
        f"Device: {platform.machine() or 'Unknown'}\n"
        f"OS Version: {platform.system()} {platform.release()}\n"
        f"Python Version: {platform.python_version()}"
    )


def build_ledger(settings: Settings) -> VoteLedger:
    return VoteLedger(JsonFileLedgerStorage(settings.ledger_path))


def build_service(settings: Settings) -> FeedbackService:
    """
    Wire the tracker client, record store and ledger from settings.

    Args:
        settings: Loaded configuration

    Returns:
        FeedbackService: Ready-to-use service; close ``service.store.tracker``
        when done.
    """
    client = TrackerClient(
        owner=settings.tracker_owner,
        repo=settings.tracker_repo,
        token=settings.tracker_token,
        base_url=settings.tracker_api_base_url,
        timeout=settings.tracker_timeout,
        page_size=settings.tracker_page_size,
        max_pages=settings.tracker_max_pages,
    )
    store = RecordStore(client, verify_before_write=settings.verify_before_write)
    return FeedbackService(store, build_ledger(settings))


async def _with_service(settings: Settings, action):
    service = build_service(settings)
    try:
        return await action(service)
    finally:
        await service.store.tracker.close()


def _run(settings: Settings, action):
    try:
        return asyncio.run(_with_service(settings, action))
    except AlreadyVoted as e:
        typer.echo(e.message)
        raise typer.Exit(code=0)
    except FeedbackError as e:
        logger.error(f"Command failed: {e}")
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)


@app.command("list")
def list_records(
    record_filter: Annotated[
        RecordFilter, typer.Option("--filter", "-f", help="Which records to show")
    ] = RecordFilter.ALL,
    log_level: Annotated[str, typer.Option(help="Logging level")] = "WARNING",
) -> None:
    """List open records sorted by votes."""
    setup_logging(log_level)
    settings = get_settings()

    async def action(service: FeedbackService):
        return await service.store.list_records(record_filter)

    records = _run(settings, action)
    if not records:
        typer.echo("No feedback yet.")
        return

    voted = build_ledger(settings).list_voted()
    for record in records:
        category = "bug" if record.is_bug else "feature"
        marker = "*" if record.number in voted else " "
        typer.echo(f"{marker} #{record.number:<6} {record.vote_count:>4} votes  [{category}] {record.title}")


@app.command()
def show(
    number: Annotated[int, typer.Argument(help="Record number")],
    log_level: Annotated[str, typer.Option(help="Logging level")] = "WARNING",
) -> None:
    """Show a record with its comments."""
    setup_logging(log_level)
    settings = get_settings()

    async def action(service: FeedbackService):
        record = await service.store.get_record(number)
        comments = await service.store.list_comments(number)
        return record, comments

    record, comments = _run(settings, action)
    typer.echo(f"#{record.number} {record.title}")
    typer.echo(f"Votes: {record.vote_count}  Reactions: {record.reaction_upvotes}  By: {record.user.login}")
    typer.echo("")
    typer.echo(record.displayable_body or "(no description)")
    for comment in comments:
        typer.echo("")
        typer.echo(f"- {comment.user.login} ({comment.created_at}): {comment.body or ''}")


@app.command()
def submit(
    title: Annotated[str, typer.Argument(help="Short summary")],
    description: Annotated[str, typer.Option("--description", "-d", help="What happened or what you want")],
    category: Annotated[Category, typer.Option("--category", "-c", help="bug or feature-request")] = Category.BUG,
    device_info: Annotated[Optional[str], typer.Option(help="Device information block")] = None,
    email: Annotated[Optional[str], typer.Option(help="Contact email")] = None,
    log_level: Annotated[str, typer.Option(help="Logging level")] = "WARNING",
) -> None:
    """Submit a bug report or feature request."""
    setup_logging(log_level)
    settings = get_settings()
    info = device_info or default_device_info()

    async def action(service: FeedbackService):
        return await service.submit_feedback(title, description, category, info, email)

    number = _run(settings, action)
    typer.echo(f"Submitted #{number}")


@app.command()
def vote(
    number: Annotated[int, typer.Argument(help="Record number")],
    log_level: Annotated[str, typer.Option(help="Logging level")] = "WARNING",
) -> None:
    """Vote for a record once from this device."""
    setup_logging(log_level)
    settings = get_settings()

    async def action(service: FeedbackService):
        return await service.cast_vote(number)

    new_count = _run(settings, action)
    typer.echo(f"Voted for #{number} ({new_count} votes)")


@app.command()
def comment(
    number: Annotated[int, typer.Argument(help="Record number")],
    body: Annotated[str, typer.Argument(help="Comment text")],
    log_level: Annotated[str, typer.Option(help="Logging level")] = "WARNING",
) -> None:
    """Add a comment to a record."""
    setup_logging(log_level)
    settings = get_settings()

    async def action(service: FeedbackService):
        return await service.store.add_comment(number, body)

    created = _run(settings, action)
    typer.echo(f"Comment {created.id} added to #{number}")


@app.command()
def react(
    number: Annotated[int, typer.Argument(help="Record number")],
    kind: Annotated[ReactionKind, typer.Option("--kind", "-k", help="Reaction content")] = ReactionKind.PLUS_ONE,
    log_level: Annotated[str, typer.Option(help="Logging level")] = "WARNING",
) -> None:
    """Add a native tracker reaction to a record."""
    setup_logging(log_level)
    settings = get_settings()

    async def action(service: FeedbackService):
        await service.store.add_reaction(number, kind)

    _run(settings, action)
    typer.echo(f"Reacted {kind.value} on #{number}")


@ledger_app.command("show")
def ledger_show() -> None:
    """List record numbers this device has voted for."""
    voted = build_ledger(get_settings()).list_voted()
    if not voted:
        typer.echo("No votes recorded on this device.")
        return
    for number in sorted(voted):
        typer.echo(f"#{number}")


@ledger_app.command("reset")
def ledger_reset(
    number: Annotated[Optional[int], typer.Argument(help="Only forget this record")] = None,
) -> None:
    """Forget local votes. Remote vote counts are not decremented."""
    ledger = build_ledger(get_settings())
    try:
        if number is None:
            ledger.clear()
            typer.echo("Cleared all local votes.")
        else:
            ledger.discard(number)
            typer.echo(f"Forgot local vote for #{number}.")
    except FeedbackError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
