"""CLI commands for inspecting and exercising registered intents."""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from skill_engine.bootstrap import build_default_service_container
from skill_engine.core.models import Session, SkillRequest, Slot
from skill_engine.services import ServiceContainer

app = typer.Typer(name="intents", help="Inspect registered intents")
console = Console()


def _get_services() -> ServiceContainer:
    """Get the service container with the default wiring."""
    return build_default_service_container()


def parse_slot_options(values: List[str]) -> dict[str, Slot]:
    """Turn ``name=value`` options into slots."""
    slots: dict[str, Slot] = {}
    for raw in values:
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Slots must look like name=value, got {raw!r}")
        slots[name.strip()] = Slot(name=name.strip(), value=value)
    return slots


@app.command("list")
def list_intents() -> None:
    """List registered intents and their handlers."""
    services = _get_services()
    handlers = services.registry.handlers()

    if not handlers:
        console.print("[dim]No intents registered.[/dim]")
        return

    table = Table(title="Registered Intents")
    table.add_column("Intent", style="cyan")
    table.add_column("Handler")
    for name in sorted(handlers):
        table.add_row(name, repr(handlers[name]))

    console.print(table)


def invoke(
    intent_name: str = typer.Argument(..., help="Intent name to dispatch"),
    slot: Optional[List[str]] = typer.Option(
        None, "--slot", "-s", help="Slot value as name=value (repeatable)"
    ),
    attributes: Optional[Path] = typer.Option(
        None, "--attributes", "-a", help="JSON file holding incoming session attributes"
    ),
    session_id: Optional[str] = typer.Option(None, "--session-id", help="Session identifier"),
    user_id: Optional[str] = typer.Option(None, "--user-id", help="User identifier"),
) -> None:
    """Dispatch one intent locally and print the response as JSON."""
    services = _get_services()

    incoming: dict = {}
    if attributes is not None:
        try:
            incoming = json.loads(attributes.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"[red]Error:[/red] could not read attributes: {e}")
            raise typer.Exit(1) from e
        if not isinstance(incoming, dict):
            console.print("[red]Error:[/red] attributes file must hold a JSON object")
            raise typer.Exit(1)

    request = SkillRequest(
        intent_name=intent_name,
        session=Session(
            session_id=session_id or f"cli.{uuid.uuid4().hex}",
            new=not incoming,
            attributes=incoming,
            user_id=user_id,
        ),
        slots=parse_slot_options(slot or []),
    )
    response = services.dispatcher.dispatch(request)
    typer.echo(
        json.dumps(
            {
                "utterance": response.utterance,
                "shouldEndSession": response.should_end_session,
                "reprompt": response.reprompt,
                "sessionAttributes": response.session_attributes,
            },
            indent=2,
            ensure_ascii=False,
        )
    )


__all__ = ["app", "invoke", "parse_slot_options"]
