"""Remote asset downloads into a freshly generated project.

Reads ``assets-manifest.json`` (a JSON array of ``AssetEntry`` objects),
keeps the entries that apply to the chosen framework, and downloads each one
into the project with ``httpx``.  Redirects are followed manually so the hop
count can be bounded, and every destination is checked to stay inside the
project directory.
"""

from __future__ import annotations

import json
import os
import posixpath
from pathlib import Path
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from ..config import Config
from ..models import Answers, AssetEntry
from ..utils import load_json, log, relative_to

MAX_REDIRECTS = 5
DEFAULT_ASSET_NAME = "asset"


class AssetDownloadError(Exception):
    """Raised when a single asset cannot be downloaded."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


def load_asset_manifest(manifest_path: str | Path) -> list[AssetEntry]:
    """Load the manifest, degrading to an empty list on any problem.

    A missing file, invalid JSON or a non-array root all yield ``[]``.  Items
    that are not objects, or do not validate, are dropped individually.
    """
    path = Path(manifest_path)
    if not path.exists():
        return []

    try:
        data = load_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log(f"Unable to parse assets manifest: {exc}")
        return []

    if not isinstance(data, list):
        log(f"Assets manifest at {path} is not a JSON array; ignoring it")
        return []

    entries: list[AssetEntry] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            entries.append(AssetEntry.model_validate(item))
        except ValidationError as exc:
            log(f"Ignoring invalid assets manifest entry {item!r}: {exc.error_count()} error(s)")
    return entries


def applicable_entries(entries: list[AssetEntry], framework: str) -> list[AssetEntry]:
    """Entries with a URL that target *framework* (or every framework)."""
    return [entry for entry in entries if entry.applies_to(framework)]


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


def default_destination(url: str) -> str:
    """``public/<basename of the URL path>``, or ``public/asset``."""
    basename = posixpath.basename(urlparse(url).path)
    return posixpath.join("public", basename or DEFAULT_ASSET_NAME)


def resolve_destination(project_dir: str | Path, dest: str) -> Path | None:
    """Absolute destination for *dest*, or ``None`` if it escapes the project.

    The comparison is lexical (``..`` segments are collapsed, symlinks are not
    followed) and component-wise, so a sibling such as ``project-evil`` is not
    mistaken for a child of ``project``.
    """
    root = Path(os.path.abspath(project_dir))
    target = Path(os.path.abspath(root / dest))
    if target == root or not target.is_relative_to(root):
        return None
    return target


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------


def _is_http_url(url: str) -> bool:
    return httpx.URL(url).scheme in ("http", "https")


def _is_redirect(response: httpx.Response) -> bool:
    return 300 <= response.status_code < 400 and "location" in response.headers


async def download_file(
    client: httpx.AsyncClient,
    url: str,
    destination: Path,
    max_redirects: int = MAX_REDIRECTS,
) -> Path:
    """Download *url* to *destination*, following at most *max_redirects* hops.

    The destination file is only created once a 2xx response has arrived; a
    failure while streaming the body removes the partial file.

    Raises:
        AssetDownloadError: On too many redirects or a non-success status.
        httpx.HTTPError: On transport failures.
    """
    current = httpx.URL(url)
    redirects = 0

    while True:
        async with client.stream("GET", current) as response:
            if _is_redirect(response):
                if redirects >= max_redirects:
                    raise AssetDownloadError(
                        url, f"Too many redirects while downloading {url}"
                    )
                redirects += 1
                current = response.url.join(response.headers["location"])
                continue

            if not response.is_success:
                raise AssetDownloadError(
                    url,
                    f"Request for {url} failed with status {response.status_code}",
                )

            destination.parent.mkdir(parents=True, exist_ok=True)
            try:
                with destination.open("wb") as handle:
                    async for chunk in response.aiter_bytes():
                        handle.write(chunk)
            except BaseException:
                destination.unlink(missing_ok=True)
                raise
            return destination


async def download_assets(
    answers: Answers,
    project_dir: str | Path,
    config: Config | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Path]:
    """Pull the manifest's assets for ``answers.framework`` into *project_dir*.

    Each entry fails in isolation: errors are logged and the next entry is
    attempted.  Returns the paths that were written.

    Args:
        answers: The validated answers; only ``framework`` is consulted.
        project_dir: Root of the generated project.
        config: Run configuration (manifest location, redirect bound, timeout).
        transport: Optional ``httpx`` transport, used by tests to stub the
            network.
    """
    config = config or Config()
    project_root = Path(os.path.abspath(project_dir))

    entries = load_asset_manifest(config.manifest_path)
    if not entries:
        log(
            "No assets to download (assets-manifest.json not found or empty "
            f"at {config.manifest_path})"
        )
        return []

    applicable = applicable_entries(entries, answers.framework)
    if not applicable:
        log("Asset manifest did not include entries for this framework; skipping downloads")
        return []

    written: list[Path] = []
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(config.download_timeout),
        follow_redirects=False,
        transport=transport,
    ) as client:
        for entry in applicable:
            url = entry.url or ""
            try:
                if not _is_http_url(url):
                    log(f"Skipping asset with a non-http(s) URL: {url}")
                    continue

                dest = entry.dest or default_destination(url)
                target = resolve_destination(project_root, dest)
                if target is None:
                    log(f"Skipping asset outside project root: {dest}")
                    continue

                await download_file(client, url, target, max_redirects=config.max_redirects)
                written.append(target)
                log(f"Downloaded asset -> {relative_to(target, project_root)}")
            except (
                AssetDownloadError,
                httpx.HTTPError,
                httpx.InvalidURL,
                OSError,
                ValueError,
            ) as exc:
                log(f"Failed to download asset {url}: {exc}")

    return written
