"""Plan and reconcile output rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import typer

from podinfo_operator.engine.types import Action

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.table import Table

    from podinfo_operator.core.gateway import PodRef
    from podinfo_operator.engine.types import ReconcileResult, ResourceChange


class _ActionStyle(NamedTuple):
    color: str
    symbol: str
    done_verb: str


_ACTION_STYLES: dict[str, _ActionStyle] = {
    "create": _ActionStyle("green", "+", "Created"),
    "update": _ActionStyle("yellow", "~", "Updated"),
    "delete": _ActionStyle("red", "-", "Deleted"),
    "no-op": _ActionStyle("bright_black", " ", ""),
}

_ACTION_DESC: dict[str, str] = {
    "create": "will be created",
    "update": "will be updated in-place",
    "delete": "will be deleted",
    "no-op": "is up-to-date",
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def has_actionable_changes(changes: list[ResourceChange]) -> bool:
    """Return True if any change is not a NOOP."""
    return any(c.action != Action.NOOP for c in changes)


def _align_values(items: dict[str, str]) -> list[tuple[str, str]]:
    """Right-pad keys so ``=`` signs align."""
    if not items:
        return []
    max_key = max(len(k) for k in items)
    return [(k.ljust(max_key), v) for k, v in items.items()]


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    return str(value)


def _env_attrs(before: dict[str, str], after: dict[str, str]) -> dict[str, str]:
    """Per-variable ``old -> new`` lines for the env entries that change."""
    return {
        f"env.{k}": f"{_format_value(before.get(k))} -> {_format_value(v)}"
        for k, v in sorted(after.items())
        if before.get(k) != v
    }


# ---------------------------------------------------------------------------
# Plan rendering
# ---------------------------------------------------------------------------


def _change_attrs(change: ResourceChange) -> dict[str, str]:
    """Extract displayable ``key -> formatted value`` pairs from a change."""
    if change.action == Action.CREATE and change.desired:
        attrs = {
            "image": _format_value(change.desired.get("image")),
            "replicas": _format_value(change.desired.get("replicas")),
        }
        env = change.desired.get("env") or {}
        attrs.update({f"env.{k}": _format_value(v) for k, v in sorted(env.items())})
        return attrs
    if change.action == Action.UPDATE and change.diff:
        diff_attrs: dict[str, str] = {}
        for k, d in change.diff.items():
            if k == "env":
                diff_attrs.update(_env_attrs(d["from"] or {}, d["to"] or {}))
            else:
                diff_attrs[k] = f"{_format_value(d['from'])} -> {_format_value(d['to'])}"
        return diff_attrs
    return {}


def format_change(change: ResourceChange, *, color: bool = True) -> str:
    """Render a single ResourceChange as a diff block."""
    style = styler(color)
    action_val = change.action.value
    sc = {"fg": _ACTION_STYLES[action_val].color}
    symbol = _ACTION_STYLES[action_val].symbol

    name = change.address.rsplit("/", 1)[-1]
    lines = [
        style(f"  # {change.address} {_ACTION_DESC[action_val]}", bold=True, **sc),
        style(f'  {symbol} deployment "{name}" ({change.role}) {{', **sc),
        *[
            style(f"      {symbol} {k} = {v}", **sc)
            for k, v in _align_values(_change_attrs(change))
        ],
        style("    }", **sc),
    ]
    return "\n".join(lines)


def format_changes(changes: list[ResourceChange], *, color: bool = True) -> str:
    """Render a list of changes as diff blocks."""
    blocks = [format_change(c, color=color) for c in changes if c.action != Action.NOOP]
    if not blocks:
        return "No changes. Children are up-to-date."
    return "\n\n".join(blocks)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

_PLAN_VERBS = ("to create", "to update", "to delete")
_SUMMARY_COLORS = ("green", "yellow", "red")


def format_plan_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Plan: 1 to create, 1 to update, 0 to delete.``"""
    style = styler(color)
    counts = (summary.get("create", 0), summary.get("update", 0), summary.get("delete", 0))
    parts = [
        style(f"{n} {verb}", fg=fg) if n and color else f"{n} {verb}"
        for n, verb, fg in zip(counts, _PLAN_VERBS, _SUMMARY_COLORS, strict=True)
    ]
    return f"Plan: {', '.join(parts)}."


def format_pass(attempt: int, result: ReconcileResult, *, color: bool = True) -> str:
    """One status line for a reconcile pass."""
    style = styler(color)
    if result.error is not None:
        state = "failed" if result.fatal else f"retrying in {result.requeue_after:.1f}s"
        return style(f"pass {attempt}: {state}: {result.error}", fg="red")
    if result.done:
        return style(f"pass {attempt}: up-to-date", fg="green")
    lines = [
        f"pass {attempt}: {_ACTION_STYLES[c.action.value].done_verb} {c.address}"
        for c in result.changes
    ]
    return "\n".join(lines) or f"pass {attempt}: requeued"


def pods_table(pods: list[PodRef]) -> Table:
    """A Rich table listing the primary workload's pods."""
    from rich.table import Table

    table = Table(title="Pods")
    table.add_column("NAME")
    table.add_column("PHASE")
    for pod in pods:
        table.add_row(pod.name, pod.phase or "Unknown")
    return table
