"""CLI interface for the agent console.

Typer-based commands to run a simulated response processing pipeline and
inspect its step timeline.
"""

import asyncio
import json
import uuid
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from agent_console.config import ProcessingTimings, get_settings
from agent_console.orchestrator import (
    ConversationEntry,
    InMemoryConversationStore,
    ResponseOrchestrator,
    categorize,
    primary,
)

app = typer.Typer(help="Agent console - AI response processing orchestrator")
console = Console()


@app.command(name="simulate")
def simulate_command(
    message: str = typer.Argument(..., help="User request to process"),
    reply: Optional[str] = typer.Option(
        None, "--reply", "-r", help="Final reply text (converts the placeholder into it)"
    ),
    failed: bool = typer.Option(False, "--failed", help="Finalize the run as failed"),
    fast: bool = typer.Option(False, "--fast", help="Skip all phase delays"),
    json_output: bool = typer.Option(False, "--json", help="Print the conversation as JSON"),
) -> None:
    """Run one simulated orchestration and show its steps.

    Examples:
        agent-console simulate "Please email John the quarterly report"
        agent-console simulate "Hello" --reply "Hi there!" --fast
    """
    if reply is not None and failed:
        raise typer.BadParameter("--reply and --failed cannot be combined")

    timings = ProcessingTimings.immediate() if fast else None
    store = InMemoryConversationStore()
    entry = asyncio.run(_run(message, store, timings, reply, failed))

    if json_output:
        console.print_json(
            json.dumps([e.model_dump(mode="json") for e in store.entries], indent=2)
        )
        return

    if entry is None:
        console.print("[yellow]Run finished without a finalized entry[/yellow]")
        raise typer.Exit(code=1)

    _print_entry(entry)


async def _run(
    message: str,
    store: InMemoryConversationStore,
    timings: ProcessingTimings | None,
    reply: str | None,
    failed: bool,
) -> ConversationEntry | None:
    orchestrator = ResponseOrchestrator(timings=timings)
    conversation_id = str(uuid.uuid4())
    with console.status("[dim]Processing...[/dim]"):
        if not failed:
            entry = await orchestrator.respond(conversation_id, store, message, reply=reply)
        else:
            ctx = orchestrator.start(conversation_id, store)
            await orchestrator.process(ctx, message)
            entry = orchestrator.finalize(ctx, success=False)
        # Let the cleanup timer fire before the loop closes.
        await asyncio.sleep(orchestrator.timings.cleanup_timeout)
    orchestrator.teardown()
    return entry


def _print_entry(entry: ConversationEntry) -> None:
    summary = entry.process_summary
    table = Table(title="Processing steps")
    table.add_column("#", justify="right")
    table.add_column("Phase", style="cyan")
    table.add_column("Label")
    table.add_column("Details", style="magenta")
    table.add_column("Done", justify="center")

    steps = summary.steps if summary else []
    for index, step in enumerate(steps, start=1):
        table.add_row(
            str(index),
            step.phase.value,
            step.label,
            step.details or "",
            "✓" if step.completed else "…",
        )
    console.print(table)

    if summary:
        tools = ", ".join(summary.tools_used) or "none"
        console.print(f"[dim]Duration: {summary.total_duration} ms | Tools: {tools}[/dim]")
    console.print(f"\n[bold blue]{entry.role}:[/bold blue] {entry.content}")


@app.command(name="classify")
def classify_command(
    message: str = typer.Argument(..., help="Request text to classify"),
) -> None:
    """Show the capability categories detected in a request."""
    categories = categorize(message)
    if not categories:
        console.print("No tool categories detected")
        return

    top = primary(categories)
    for category in categories:
        marker = " [bold](primary)[/bold]" if top and category.id == top.id else ""
        console.print(f"{category.id}: {category.label}{marker}")


@app.command(name="config")
def config_command() -> None:
    """Show the active processing timings."""
    settings = get_settings()
    table = Table(title=f"{settings.project_name} {settings.version}")
    table.add_column("Setting")
    table.add_column("Value (ms)", justify="right")
    for name in (
        "processing_thinking_delay_ms",
        "processing_analyzing_tools_delay_ms",
        "processing_tool_execution_delay_ms",
        "processing_results_delay_ms",
        "processing_generating_response_delay_ms",
        "processing_cleanup_timeout_ms",
    ):
        table.add_row(name, str(getattr(settings, name)))
    console.print(table)


if __name__ == "__main__":
    app()
