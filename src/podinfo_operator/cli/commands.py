"""CLI command implementations."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from podinfo_operator.cli import app
from podinfo_operator.cli.errors import handle_error

if TYPE_CHECKING:
    from podinfo_operator.config.schema import Config
    from podinfo_operator.engine.types import ReconcileResult

DEFAULT_CONFIG = Path("podinfo-operator.yaml")

Name = Annotated[
    str,
    typer.Argument(help="MyAppResource name, or namespace/name."),
]

Namespace = Annotated[
    str | None,
    typer.Option("--namespace", "-n", help="Namespace (defaults to the configured one)."),
]

ConfigPath = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _load(config: Path | None) -> Config:
    """Load *config*, or ``podinfo-operator.yaml`` if present, or the environment alone."""
    from podinfo_operator.config import load

    if config is None and DEFAULT_CONFIG.is_file():
        config = DEFAULT_CONFIG
    return load(config)


def _print_pods(result: ReconcileResult, *, color: bool) -> None:
    from rich.console import Console

    from podinfo_operator.cli.formatting import pods_table

    if result.pods:
        Console(no_color=not color).print(pods_table(result.pods))


@app.command()
def reconcile(
    name: Name,
    namespace: Namespace = None,
    config: ConfigPath = None,
    until_converged: Annotated[
        bool,
        typer.Option("--until-converged", help="Keep reconciling until nothing is left to do."),
    ] = False,
    max_passes: Annotated[
        int,
        typer.Option("--max-passes", min=1, help="Pass limit for --until-converged."),
    ] = 10,
    no_color: NoColor = False,
) -> None:
    """Reconcile one MyAppResource against the cluster."""
    from podinfo_operator.cli.formatting import format_pass
    from podinfo_operator.config import converge, identity_for
    from podinfo_operator.config import reconcile as reconcile_fn

    color = _use_color(no_color)

    def on_pass(attempt: int, result: ReconcileResult) -> None:
        typer.echo(format_pass(attempt, result, color=color))

    try:
        cfg = _load(config)
        identity = identity_for(cfg, name, namespace)
        if until_converged:
            result = converge(cfg, identity, max_passes=max_passes, on_pass=on_pass)
        else:
            result = reconcile_fn(cfg, identity)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if result.error is not None:
        raise typer.Exit(handle_error(result.error, color=color))

    if not until_converged:
        on_pass(1, result)
    _print_pods(result, color=color)

    if until_converged and not result.done:
        typer.echo(f"{identity} did not converge after {max_passes} passes.", err=True)
        raise typer.Exit(1)


@app.command()
def plan(
    name: Name,
    namespace: Namespace = None,
    config: ConfigPath = None,
    no_color: NoColor = False,
) -> None:
    """Show the changes a reconcile would make, without making them."""
    from podinfo_operator.cli.formatting import (
        format_changes,
        format_plan_summary,
        has_actionable_changes,
    )
    from podinfo_operator.config import identity_for
    from podinfo_operator.config import plan as plan_fn
    from podinfo_operator.engine.types import summarize

    color = _use_color(no_color)
    try:
        cfg = _load(config)
        changes = plan_fn(cfg, identity_for(cfg, name, namespace))
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_changes(changes, color=color))
    typer.echo()
    typer.echo(format_plan_summary(summarize(changes), color=color))

    if has_actionable_changes(changes):
        raise typer.Exit(2)


@app.command()
def render(
    manifest: Annotated[
        Path,
        typer.Option("--file", "-f", help="MyAppResource manifest to render."),
    ],
    no_color: NoColor = False,
) -> None:
    """Print the Deployments derived from a manifest, without touching a cluster."""
    from ruamel.yaml import YAML

    from podinfo_operator.config import load_manifest
    from podinfo_operator.config import render as render_fn

    color = _use_color(no_color)
    try:
        docs = render_fn(load_manifest(manifest))
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    yaml.explicit_start = True
    yaml.dump_all(docs, sys.stdout)
