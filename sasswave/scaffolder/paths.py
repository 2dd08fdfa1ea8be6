"""Candidate path tables and first-match resolution.

Upstream generators change their output layout between versions and language
variants, so every file the post-processors touch is located through an ordered
list of plausible relative paths.  Exactly one layout is assumed to be present.
"""

from __future__ import annotations

from pathlib import Path

# Paths are relative to the project root.
REACT_APP_CANDIDATES: dict[str, list[str]] = {
    "ts": ["src/App.tsx"],
    "js": ["src/App.jsx", "src/App.js"],
}

VITE_ENTRY_CANDIDATES: list[str] = [
    "src/main.tsx",
    "src/main.ts",
    "src/main.jsx",
    "src/main.js",
]

# Paths are relative to ``src/app``.
NEXT_LAYOUT_CANDIDATES: dict[str, list[str]] = {
    "ts": ["layout.tsx", "layout.ts"],
    "js": ["layout.js", "layout.jsx"],
}

NEXT_PAGE_CANDIDATES: dict[str, list[str]] = {
    "ts": ["page.tsx", "page.ts"],
    "js": ["page.js", "page.jsx"],
}


def find_existing(base_dir: str | Path, candidates: list[str]) -> Path | None:
    """Return the first candidate that exists under *base_dir*, or ``None``."""
    base = Path(base_dir).absolute()
    for relative in candidates:
        candidate = base / relative
        try:
            if candidate.exists():
                return candidate
        except OSError:
            continue
    return None


def resolve_candidate(base_dir: str | Path, candidates: list[str]) -> Path:
    """Return the first existing candidate, else the first candidate's path.

    The fallback lets callers write unconditionally: when the generator did
    not produce any of the expected files, the preferred location is created.
    """
    if not candidates:
        raise ValueError("resolve_candidate() needs at least one candidate path")
    found = find_existing(base_dir, candidates)
    if found is not None:
        return found
    return Path(base_dir).absolute() / candidates[0]
