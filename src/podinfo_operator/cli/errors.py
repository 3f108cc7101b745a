"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from podinfo_operator.config.loader import ConfigError
    from podinfo_operator.core.errors import (
        CanceledError,
        ConflictError,
        GatewayError,
        InvalidRequestError,
        NotFoundError,
    )
    from podinfo_operator.engine.errors import ValidationError

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, ValidationError):
        _err("Validation failed:", fg=fg)
        for e in exc.errors:
            _err(f"  - {e}", fg=fg)
    elif isinstance(exc, CanceledError):
        _err(f"Reconcile canceled: {exc}", fg=fg)
    elif isinstance(exc, ConflictError):
        _err(f"Conflict (retry later): {exc}", fg=fg)
    elif isinstance(exc, NotFoundError):
        _err(f"Not found: {exc}", fg=fg)
    elif isinstance(exc, InvalidRequestError):
        _err(f"Rejected by the API server: {exc}", fg=fg)
    elif isinstance(exc, GatewayError):
        _err(f"Cluster unavailable: {exc}", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
