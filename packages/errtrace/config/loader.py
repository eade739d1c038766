"""Settings entry point for command-line tools and services.

Precedence is owned by ``TraceSettings.settings_customise_sources``:
1) CLI params (init kwargs)
2) ``TRACE_`` environment variables, ``__`` between nested keys
3) ~/.config/errtrace/errtrace.yaml
4) Model defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Mapping

from .models import TraceSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> TraceSettings:
    """Load and validate settings, optionally reading YAML from ``config_path``."""
    settings_cls = TraceSettings
    if config_path is not None:
        settings_cls = _with_config_path(Path(config_path))
    return settings_cls(**dict(cli_params or {}))


def _with_config_path(path: Path) -> type[TraceSettings]:
    """Return a ``TraceSettings`` variant whose YAML source reads ``path``."""

    class _FileTraceSettings(TraceSettings):
        _config_path: ClassVar[Path] = path

    return _FileTraceSettings
