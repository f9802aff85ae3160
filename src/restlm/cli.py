from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console

from .bootstrap import build_app
from .core.errors import ConfigurationError
from .core.ports import CompletionClient
from .core.result import Result

app = typer.Typer(add_completion=False)

# Anchor repo root from .../repo/src/restlm/cli.py
REPO_ROOT = Path(__file__).resolve().parents[2]

_err = Console(stderr=True)


async def _run(client: CompletionClient, prompt: str) -> Result[str]:
    try:
        return await client.complete(prompt)
    finally:
        await client.aclose()


@app.command()
def complete(
    prompt: str = typer.Argument(..., help="Prompt text to complete."),
    config: Path = typer.Option(REPO_ROOT / "config" / "default.yaml", help="YAML config file."),
    max_attempts: Optional[int] = typer.Option(None, min=0, help="Override retry.max_attempts."),
    pause_ms: Optional[int] = typer.Option(None, min=0, help="Override retry.pause_ms."),
):
    try:
        ctx = build_app(config)
    except (ConfigurationError, FileNotFoundError) as e:
        _err.print(f"[red]config:[/red] {e}")
        raise typer.Exit(code=2)

    client = ctx["client"]
    if max_attempts is not None:
        client.retry_max_attempts = max_attempts
    if pause_ms is not None:
        client.retry_pause_ms = pause_ms

    result = asyncio.run(_run(client, prompt))
    if not result.success:
        _err.print(f"[red]{ctx['provider']}:[/red] {result.message}")
        raise typer.Exit(code=1)
    typer.echo(result.data)
