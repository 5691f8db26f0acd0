"""CLI commands for skill-engine."""

import typer

from skill_engine.cli.intents import app as intents_app
from skill_engine.cli.intents import invoke

main_app = typer.Typer(
    name="skill-engine",
    help="Skill Engine CLI",
    no_args_is_help=True,
)
main_app.add_typer(intents_app, name="intents")
main_app.command("invoke")(invoke)


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
