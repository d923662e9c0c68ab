"""PipoJournal CLI - journal and goals dashboard."""

import asyncio
import json
import logging
import sys

import click

from .adapters import SupabaseAuth
from .config import load_config
from .core.records import Mood
from .core.render import render_goals, render_journal
from .dashboard import DashboardView
from .ports.auth_provider import AuthenticationError
from .workflows import build_dashboard, run_with_dashboard


def _entries_json(view: DashboardView) -> list[dict]:
    return [
        {
            "id": e.id,
            "title": e.title,
            "content": e.content,
            "mood": e.mood,
            "created_at": e.created_at.isoformat(),
        }
        for e in view.entries.records
    ]


def _goals_json(view: DashboardView) -> list[dict]:
    return [
        {
            "id": g.id,
            "title": g.title,
            "description": g.description,
            "target_date": g.target_date.isoformat() if g.target_date else None,
            "progress": g.progress,
            "created_at": g.created_at.isoformat(),
        }
        for g in view.goals.records
    ]


@click.group()
@click.version_option(package_name="pipojournal")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and failures")
def main(verbose: bool):
    """PipoJournal - journal entries and personal goals."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO if verbose else logging.WARNING,
    )


@main.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Sign in and store the session."""
    config = load_config()
    try:
        SupabaseAuth(config).sign_in(email, password)
    except AuthenticationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Signed in as {email}.")


@main.command()
def logout():
    """Sign out."""
    config = load_config()

    async def run():
        view = build_dashboard(config)
        await view.sign_out()

    asyncio.run(run())
    click.echo("Signed out.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def journal(as_json: bool):
    """List journal entries, newest first."""
    config = load_config()

    async def show(view: DashboardView):
        if as_json:
            click.echo(json.dumps(_entries_json(view), indent=2))
        else:
            click.echo(render_journal(view.entries.records, config.timezone))

    asyncio.run(run_with_dashboard(build_dashboard(config), show))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def goals(as_json: bool):
    """List goals with progress."""
    config = load_config()

    async def show(view: DashboardView):
        if as_json:
            click.echo(json.dumps(_goals_json(view), indent=2))
        else:
            click.echo(render_goals(view.goals.records))

    asyncio.run(run_with_dashboard(build_dashboard(config), show))


@main.command()
def dashboard():
    """Show journal entries and goals."""
    config = load_config()

    async def show(view: DashboardView):
        click.echo(render_journal(view.entries.records, config.timezone))
        click.echo()
        click.echo(render_goals(view.goals.records))

    asyncio.run(run_with_dashboard(build_dashboard(config), show))


@main.command()
@click.option("--title", "-t", prompt="What's on your mind?", help="Entry title")
@click.option(
    "--mood",
    "-m",
    type=click.Choice([m.value for m in Mood]),
    default=Mood.NEUTRAL.value,
    show_default=True,
    help="How are you feeling?",
)
@click.option("--content", "-c", prompt="Write your thoughts", help="Entry content")
def entry(title: str, mood: str, content: str):
    """Write a new journal entry."""
    config = load_config()

    async def create(view: DashboardView) -> bool:
        form = view.entries.form
        form.update(title=title, content=content, mood=Mood(mood))
        if form.missing_fields():
            click.echo(f"Error: missing {', '.join(form.missing_fields())}", err=True)
            return False
        if not await view.create_entry():
            click.echo("Error: could not save entry (run with --verbose for details)", err=True)
            return False
        click.echo(render_journal(view.entries.records, config.timezone))
        return True

    if not asyncio.run(run_with_dashboard(build_dashboard(config), create)):
        sys.exit(1)


@main.command()
@click.option("--title", "-t", prompt="What do you want to achieve?", help="Goal title")
@click.option("--description", "-d", default="", help="Describe your goal")
@click.option("--target-date", default="", help="Target date (YYYY-MM-DD)")
def goal(title: str, description: str, target_date: str):
    """Set a new goal."""
    config = load_config()

    async def create(view: DashboardView) -> bool:
        form = view.goals.form
        form.update(title=title, description=description, target_date=target_date)
        if form.missing_fields():
            click.echo(f"Error: missing {', '.join(form.missing_fields())}", err=True)
            return False
        if not await view.create_goal():
            click.echo("Error: could not save goal (run with --verbose for details)", err=True)
            return False
        click.echo(render_goals(view.goals.records))
        return True

    if not asyncio.run(run_with_dashboard(build_dashboard(config), create)):
        sys.exit(1)


@main.command()
def bot():
    """Run the Telegram bot."""
    from .telegram_bot import run_bot

    try:
        run_bot()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
