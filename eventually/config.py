"""
Process-wide defaults.

Per-call timeout/polling arguments override these. Values can come from the
environment:

    EVENTUALLY_TIMEOUT_S          default wait timeout (seconds)
    EVENTUALLY_POLL_S             polling interval (seconds)
    EVENTUALLY_REPORTS_DIR        where failure artifacts are written
    EVENTUALLY_SCREENSHOTS        "0"/"false" disables screenshot capture
    EVENTUALLY_SAVE_PAGE_SOURCE   "0"/"false" disables page source capture
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_POLL_S, DEFAULT_REPORTS_DIR, DEFAULT_TIMEOUT_S


def _flag(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip() not in {"0", "false", "False", "no"}


class Configuration(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout_s: float = Field(DEFAULT_TIMEOUT_S, ge=0)
    poll_s: float = Field(DEFAULT_POLL_S, ge=0)
    reports_dir: str = DEFAULT_REPORTS_DIR
    screenshots: bool = True
    save_page_source: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Configuration:
        env = os.environ if environ is None else environ
        values: dict = {}
        if env.get("EVENTUALLY_TIMEOUT_S"):
            values["timeout_s"] = float(env["EVENTUALLY_TIMEOUT_S"])
        if env.get("EVENTUALLY_POLL_S"):
            values["poll_s"] = float(env["EVENTUALLY_POLL_S"])
        if env.get("EVENTUALLY_REPORTS_DIR"):
            values["reports_dir"] = env["EVENTUALLY_REPORTS_DIR"]
        values["screenshots"] = _flag(env.get("EVENTUALLY_SCREENSHOTS"), True)
        values["save_page_source"] = _flag(env.get("EVENTUALLY_SAVE_PAGE_SOURCE"), True)
        return cls(**values)


_config: Configuration | None = None


def get_config() -> Configuration:
    """Current process-wide configuration (loaded from the environment on first use)."""
    global _config
    if _config is None:
        _config = Configuration.from_env()
    return _config


def set_config(config: Configuration | None) -> None:
    """Replace the process-wide configuration; None reloads from the environment next time."""
    global _config
    _config = config
