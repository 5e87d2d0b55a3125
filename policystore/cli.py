"""Command line interface for inspecting and editing stored policy."""

from __future__ import annotations

import asyncio
import os
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from pymongo.errors import PyMongoError

from policystore.adapter import ManagedPolicyAdapter, PolicyAdapter
from policystore.config import load_config
from policystore.models import PolicyModel
from policystore.selector import FieldFilter
from policystore.stores import get_store

T = TypeVar("T")

app = typer.Typer(help="CLI for policystore rule storage")


def _run(action: Callable[[PolicyAdapter], Awaitable[T]]) -> T:
    """Open the configured store for the duration of ``action``.

    Exits with code 1 when the store is not persistent or an operation fails.
    """

    config = load_config()
    backend = (os.getenv("POLICYSTORE_BACKEND") or config.store.backend).lower()
    if backend == "inmemory":
        typer.secho(
            "The inmemory store does not keep rules between commands; "
            "set store.backend to mongo in the config file",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)

    async def runner() -> T:
        store = get_store(config=config)
        async with ManagedPolicyAdapter(store) as adapter:
            return await action(adapter)

    try:
        return asyncio.run(runner())
    except (ValueError, PyMongoError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """policystore CLI entry point."""
    pass


@app.command("show")
def show(
    ptype: Optional[str] = typer.Option(None, help="Only show rules of this policy type"),
) -> None:
    """
    Print stored rules, one per line, in Casbin CSV form.

    Example:
        policystore show
        # Output: p, alice, data1, read
        #         g, alice, admin
    """

    async def action(adapter: PolicyAdapter) -> PolicyModel:
        model = PolicyModel()
        await adapter.load_filtered_policy(model, FieldFilter(ptype=ptype) if ptype else None)
        return model

    model = _run(action)
    lines = [
        ", ".join([key, *rule])
        for section in sorted(model.model)
        for key, assertion in sorted(model[section].items())
        for rule in assertion.policy
    ]
    if not lines:
        typer.echo("No rules found")
        return
    for line in lines:
        typer.echo(line)


@app.command("add")
def add(ptype: str, values: List[str]) -> None:
    """Store one rule, e.g. ``policystore add p alice data1 read``."""
    _run(lambda adapter: adapter.add_policy(ptype[:1], ptype, values))
    typer.echo(f"Added {', '.join([ptype, *values])}")


@app.command("remove")
def remove(ptype: str, values: List[str]) -> None:
    """Remove one stored copy of a rule."""
    _run(lambda adapter: adapter.remove_policy(ptype[:1], ptype, values))
    typer.echo(f"Removed {', '.join([ptype, *values])}")


@app.command("remove-filtered")
def remove_filtered(
    ptype: str,
    values: Optional[List[str]] = typer.Argument(None),
    field_index: int = typer.Option(0, "--field-index", "-i", help="Column the first value applies to"),
) -> None:
    """
    Remove every rule matching the given values.

    Empty values match anything, so ``policystore remove-filtered p "" data1``
    removes all ``p`` rules on data1.

    Example:
        policystore remove-filtered p --field-index 1 data1
    """
    _run(
        lambda adapter: adapter.remove_filtered_policy(
            ptype[:1], ptype, field_index, *(values or [])
        )
    )
    typer.echo("Removed matching rules")


if __name__ == "__main__":
    app()
