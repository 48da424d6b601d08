"""CLI for EconPulse."""
from __future__ import annotations

import asyncio
import json
import logging

import httpx
import typer

from econpulse.config import get_settings

app_cli = typer.Typer(name="econpulse", help="EconPulse CLI")


async def _fetch_records(codes: list[str]) -> list[dict]:
    from econpulse.service import HealthService

    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        service = HealthService.from_settings(client, settings)
        records = await service.get_health_records(codes)
    return [r.model_dump(mode="json") for r in records]


async def _fetch_countries() -> list[dict]:
    from econpulse.ingest.lookup import LookupFailed
    from econpulse.ingest.world_bank import WorldBankClient

    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        wb = WorldBankClient(client, settings.world_bank_base_url, settings.request_timeout)
        try:
            countries = await wb.list_countries()
        except LookupFailed as e:
            typer.echo(f"Failed to fetch country list: {e}", err=True)
            raise typer.Exit(1)
    return [c.model_dump() for c in countries]


@app_cli.command()
def health(
    codes: list[str] = typer.Argument(None, help="Country codes, e.g. SWE NOR. Defaults to the configured set."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Fetch and score one or more countries, print the records as JSON."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    records = asyncio.run(_fetch_records(codes or get_settings().default_countries))
    typer.echo(json.dumps(records, indent=2, ensure_ascii=False))


@app_cli.command()
def countries():
    """List selectable countries (aggregates excluded)."""
    for c in asyncio.run(_fetch_countries()):
        typer.echo(f"{c['code']}\t{c['name']}\t{c['region']}")


@app_cli.command()
def serve(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = False,
):
    """Start the API server."""
    import uvicorn
    uvicorn.run("econpulse.main:app", host=host, port=port, reload=reload)
