"""PulseMind CLI -- operator tooling for the trust ladder and moderation."""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pulsemind import __version__

console = Console()


def _services():
    from pulsemind.services import build_services

    return build_services()


@click.group()
@click.version_option(version=__version__)
def main():
    """PulseMind -- trust ladder and toxicity gate.

    Inspect users' readiness, replay engagement events, classify text and
    review the moderation queue.
    """


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
def check(text: str):
    """Classify TEXT with the toxicity gate."""
    from pulsemind.moderation.classifier import evaluate

    verdict = evaluate(text)
    status = "[red]TOXIC[/]" if verdict.is_toxic else "[green]OK[/]"
    console.print(f"\n{status}  score={verdict.score:.2f}")
    if verdict.flagged_terms:
        console.print(f"  flagged: {', '.join(verdict.flagged_terms)}")


# ── Readiness ────────────────────────────────────────────────────────


@main.command()
@click.argument("user_id")
def readiness(user_id: str):
    """Show USER_ID's trust counters and next milestone."""
    from pulsemind.errors import UserNotFoundError

    services = _services()
    try:
        report = services.ladder.readiness(user_id)
    except UserNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise SystemExit(1)

    r = report.record
    table = Table(title=f"Trust record: {user_id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Phase", r.current_phase.value)
    table.add_row("Readiness", f"{r.readiness_score:.1f}")
    table.add_row("Sessions", str(r.session_count))
    table.add_row("Engagement days", str(r.engagement_days))
    table.add_row("Therapies adopted", str(r.therapy_adoption_count))
    table.add_row("Mood stability", "-" if r.mood_stability_score is None else f"{r.mood_stability_score:.0f}")
    table.add_row("Reputation", f"{r.reputation_score:.0f}")
    table.add_row("Toxicity flags", str(r.toxicity_flags))
    table.add_row("Shadow banned", "yes" if r.is_shadow_banned else "no")
    console.print(table)
    console.print(
        Panel(
            f"{report.milestone.label} -- {report.milestone.progress_percent:.0f}%",
            title="Next milestone",
        )
    )


# ── Track ────────────────────────────────────────────────────────────


@main.command()
@click.argument("user_id")
@click.argument("action")
@click.option("--mood", type=float, default=None, help="Mood score for assessment_complete")
def track(user_id: str, action: str, mood: float | None):
    """Record ACTION (session, therapy_adoption, assessment_complete) for USER_ID."""
    from pulsemind.errors import InvalidSubmissionError, UserNotFoundError

    services = _services()
    payload = {"moodScore": mood} if mood is not None else None
    try:
        result = services.ladder.track_engagement(user_id, action, payload)
    except (UserNotFoundError, InvalidSubmissionError) as exc:
        console.print(f"[red]{exc}[/]")
        raise SystemExit(1)
    console.print(
        f"[green]v[/] readiness={result.readiness_score:.1f} phase={result.current_phase.value}"
    )


# ── Moderation ───────────────────────────────────────────────────────


@main.command()
@click.option("--limit", default=50, show_default=True)
def queue(limit: int):
    """List pending moderation flags, newest first."""
    flags = _services().flags.pending(limit=limit)
    if not flags:
        console.print("[yellow]Moderation queue is empty.[/]")
        return

    table = Table(title=f"Pending flags ({len(flags)})")
    table.add_column("Flagged at", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Author")
    table.add_column("Score", justify="right", style="red")
    table.add_column("Reason")
    for f in flags:
        table.add_row(
            f.flagged_at[:19],
            f.content_type.value,
            f.author_id or "-",
            f"{f.toxicity_score:.2f}",
            f.reason[:50],
        )
    console.print(table)


@main.command()
@click.argument("email")
@click.option("--role", default="moderator", type=click.Choice(["admin", "moderator", "member"]))
def promote(email: str, role: str):
    """Give the account registered under EMAIL a new ROLE."""
    from pulsemind.accounts.models import Role

    users = _services().users
    user = users.get_user_by_email(email)
    if user is None:
        console.print(f"[red]No account for {email}[/]")
        raise SystemExit(1)
    users.update_user_role(user.id, Role(role))
    console.print(f"[green]v[/] {user.username} is now {role}")


@main.command()
@click.option("--action", default=None, help="Only show this audit action")
@click.option("--limit", default=20, show_default=True)
def audit(action: str | None, limit: int):
    """Show recent audit events."""
    entries = _services().audit.get_events(action=action, limit=limit)
    table = Table(title="Audit log")
    table.add_column("Timestamp", style="dim")
    table.add_column("Actor")
    table.add_column("Action", style="cyan")
    table.add_column("Resource")
    for e in entries:
        table.add_row(e.timestamp[:19], e.actor, e.action, f"{e.resource_type}:{e.resource_id}")
    console.print(table)


if __name__ == "__main__":
    main()
