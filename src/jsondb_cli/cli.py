from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from jsondb import (
    BaseStore,
    Document,
    InvalidIdError,
    NotFoundError,
    StoreConfig,
    iter_entries,
    load_config,
    open_store,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = typer.Typer(help="jsondb CLI")
debug_app = typer.Typer(help="Debug commands")
app.add_typer(debug_app, name="debug")

DirOption = typer.Option(
    None,
    "--dir",
    help="Entry directory. Overrides the configured directory.",
)
ConfigOption = typer.Option(
    None,
    "--config",
    help="Config file path (JSON or YAML).",
    exists=True,
    dir_okay=False,
    readable=True,
)
NoCacheOption = typer.Option(
    False,
    "--no-cache",
    help="Read straight from disk instead of through the in-memory cache.",
)


@app.command()
def create(
    data: str | None = typer.Option(None, "--data", "-d", help="JSON object. Reads stdin if omitted."),
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """Store a new entry and print its id."""
    store = _open_store(directory, config_path, no_cache)
    entry = _parse_document(data)
    entry_id = store.create(entry)
    typer.echo(entry_id)


@app.command()
def get(
    entry_id: str = typer.Argument(..., help="Entry id."),
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """Print one entry as JSON."""
    store = _open_store(directory, config_path, no_cache)
    with _store_errors():
        entry = store.read(entry_id, Document())
    typer.echo(entry.model_dump_json())


@app.command()
def update(
    entry_id: str = typer.Argument(..., help="Entry id."),
    data: str | None = typer.Option(None, "--data", "-d", help="JSON object. Reads stdin if omitted."),
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """Replace the fields of an existing entry, keeping its creation time."""
    store = _open_store(directory, config_path, no_cache)
    entry = _parse_document(data)
    with _store_errors():
        current = store.read(entry_id, Document())
        if current.created_at is not None:
            entry.created(current.created_at)
        store.update(entry_id, entry)
    typer.echo(f"updated {entry_id}")


@app.command()
def delete(
    entry_id: str = typer.Argument(..., help="Entry id."),
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """Delete an entry."""
    store = _open_store(directory, config_path, no_cache)
    with _store_errors():
        store.delete(entry_id)
    typer.echo(f"deleted {entry_id}")


@app.command("ls")
def list_ids(
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """List entry ids, one per line."""
    store = _open_store(directory, config_path, no_cache)
    for entry_id in store.list_ids():
        typer.echo(entry_id)


@app.command()
def dump(
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """Print every entry as one JSON document per line."""
    store = _open_store(directory, config_path, no_cache)
    with _store_errors():
        for entry in iter_entries(store, Document):
            typer.echo(entry.model_dump_json())


@app.command()
def count(
    directory: Path | None = DirOption,
    config_path: Path | None = ConfigOption,
    no_cache: bool = NoCacheOption,
) -> None:
    """Print the number of stored entries."""
    store = _open_store(directory, config_path, no_cache)
    typer.echo(str(store.scanner().length()))


@debug_app.command("store")
def debug_store(
    directory: Path = typer.Option(
        Path("data/debug-entries"),
        "--dir",
        help="Scratch entry directory.",
    ),
    no_cache: bool = NoCacheOption,
) -> None:
    """Run a create/read/update/scan/delete smoke test."""
    store = _open_store(directory, None, no_cache)

    sample = Document.model_validate({"title": "store smoke test"})
    entry_id = store.create(sample)
    loaded = store.read(entry_id, Document())

    loaded_payload = loaded.model_dump()
    loaded_payload["title"] = "store smoke test (updated)"
    store.update(entry_id, Document.model_validate(loaded_payload))
    updated = store.read(entry_id, Document())

    scanned = sum(1 for _ in iter_entries(store, Document))
    store.delete(entry_id)

    ok = (
        loaded.model_dump().get("title") == "store smoke test"
        and updated.model_dump().get("title") == "store smoke test (updated)"
        and updated.modified_at is not None
        and scanned >= 1
    )
    if not ok:
        typer.echo("store check failed", err=True)
        raise typer.Exit(code=1)

    logging.info("debug store ok id=%s scanned=%d", entry_id, scanned)
    typer.echo(f"store ok (id={entry_id}, scanned={scanned})")


def _open_store(directory: Path | None, config_path: Path | None, no_cache: bool) -> BaseStore:
    config = load_config(config_path) if config_path is not None else StoreConfig()
    overrides: dict[str, Any] = {}
    if directory is not None:
        overrides["directory"] = str(directory)
    if no_cache:
        overrides["caching"] = config.caching.model_copy(update={"enabled": False})
    if overrides:
        config = config.model_copy(update=overrides)
    return open_store(config)


def _parse_document(data: str | None) -> Document:
    if data is None:
        data = typer.get_text_stream("stdin").read()
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        typer.echo(f"invalid JSON: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    if not isinstance(payload, dict):
        typer.echo("invalid JSON: entry must be an object", err=True)
        raise typer.Exit(code=2)
    try:
        return Document.model_validate(payload)
    except ValidationError as exc:
        typer.echo(f"invalid entry: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except NotFoundError as exc:
        typer.echo(f"not found: {exc.entity_id}", err=True)
        raise typer.Exit(code=1) from exc
    except InvalidIdError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    except ValidationError as exc:
        typer.echo(f"invalid stored entry: {exc.errors()[0]['msg']}", err=True)
        raise typer.Exit(code=1) from exc
