"""SassWave Create configuration.

Typed run configuration built once by the CLI entry point (usually from the
environment) and passed explicitly to every stage.  Nothing downstream reads
environment variables on its own.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_MANIFEST_PATH = PACKAGE_ROOT / "assets-manifest.json"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(*names: str) -> bool | None:
    """Return the boolean value of the first variable set among *names*."""
    for name in names:
        value = os.environ.get(name)
        if value is not None and value.strip():
            return value.strip().lower() in _TRUTHY
    return None


class Config(BaseModel):
    """Global SassWave Create configuration."""

    manifest_path: Path = Field(
        default=DEFAULT_MANIFEST_PATH,
        description="JSON array describing remote assets to fetch into new projects",
    )
    skip_three_install: bool = Field(
        default=False,
        description="Skip installing the three.js packages (used by automated tests)",
    )
    max_redirects: int = Field(default=5, ge=0, description="Redirect hops allowed per asset")
    download_timeout: float = Field(
        default=30.0, gt=0, description="Per-request timeout in seconds for asset downloads"
    )
    start_dev_server: bool = Field(
        default=True, description="Start the framework dev server once scaffolding completes"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SASSWAVE_ASSETS_MANIFEST, SASSWAVE_SKIP_THREE_INSTALL (or
            CI_SKIP_THREE_INSTALL), SASSWAVE_MAX_REDIRECTS,
            SASSWAVE_DOWNLOAD_TIMEOUT, SASSWAVE_START_DEV_SERVER.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SASSWAVE_ASSETS_MANIFEST"):
            kwargs["manifest_path"] = Path(os.environ["SASSWAVE_ASSETS_MANIFEST"])

        skip = _env_flag("SASSWAVE_SKIP_THREE_INSTALL", "CI_SKIP_THREE_INSTALL")
        if skip is not None:
            kwargs["skip_three_install"] = skip

        if os.environ.get("SASSWAVE_MAX_REDIRECTS"):
            kwargs["max_redirects"] = int(os.environ["SASSWAVE_MAX_REDIRECTS"])
        if os.environ.get("SASSWAVE_DOWNLOAD_TIMEOUT"):
            kwargs["download_timeout"] = float(os.environ["SASSWAVE_DOWNLOAD_TIMEOUT"])

        start = _env_flag("SASSWAVE_START_DEV_SERVER")
        if start is not None:
            kwargs["start_dev_server"] = start

        return cls(**kwargs)
