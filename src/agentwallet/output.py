"""
Rendering of command results for the terminal.

Two modes: a JSON envelope (``--json``) for scripts and agents, or short
human-readable lines.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Optional

import click


def envelope(data: Any = None, error: Optional[dict[str, str]] = None) -> dict[str, Any]:
    return {"success": error is None, "data": data, "error": error}


def render_key_values(data: dict[str, Any]) -> str:
    lines = []
    for key, value in data.items():
        if value is None:
            continue
        shown = json.dumps(value) if isinstance(value, (dict, list)) else value
        lines.append(f"{key}: {shown}")
    return "\n".join(lines)


def render_list(rows: Iterable[str]) -> str:
    return "\n".join(f"- {row}" for row in rows)


def emit_success(
    data: Any,
    as_json: bool,
    formatter: Optional[Callable[[Any], str]] = None,
) -> None:
    if as_json:
        click.echo(json.dumps(envelope(data=data), indent=2))
    elif formatter is not None:
        click.echo(formatter(data))
    else:
        click.echo(render_key_values(data))


def emit_error(message: str, code: str, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(envelope(error={"code": code, "message": message}), indent=2))
    else:
        click.secho(message, fg="red", err=True)
