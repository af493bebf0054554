"""Read and update the `.env.defaults` / `.env` files of a checkout.

`.env.defaults` is the version-controlled catalog of every key. `.env` holds
local secrets (Blockfrost key, wallet phrases) and overrides the catalog.
Neither file is required; in CI everything can come from the environment.
"""
from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional

REPO_ROOT = Path(__file__).resolve().parent.parent.parent

LAYERS = (".env.defaults", ".env")


def parse_env_lines(lines: Iterable[str]) -> Dict[str, str]:
    """Parse `KEY=value` lines; `export KEY=value` and quoted values are accepted."""
    values: Dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        values[key] = value
    return values


def parse_env_file(env_path: Path) -> Dict[str, str]:
    with env_path.open("r", encoding="utf-8") as handle:
        return parse_env_lines(handle)


def env_search_dirs(root: Path = REPO_ROOT, cwd: Optional[Path] = None) -> List[Path]:
    """The checkout root, then the working directory when it differs."""
    dirs = [root]
    if cwd is None:
        # Path.cwd() raises if the working directory was deleted
        try:
            cwd = Path.cwd()
        except OSError:
            return dirs
    if cwd.resolve() != root.resolve():
        dirs.append(cwd)
    return dirs


def load_env_layers(dirs: Iterable[Path]) -> Dict[str, str]:
    """Merge every `.env.defaults` in `dirs`, then every `.env` on top."""
    dirs = list(dirs)
    merged: Dict[str, str] = {}
    for layer in LAYERS:
        for directory in dirs:
            path = directory / layer
            if path.exists():
                merged.update(parse_env_file(path))
    return merged


@lru_cache(maxsize=1)
def load_defaults() -> Dict[str, str]:
    """Cached `load_env_layers()` over the checkout and the working directory."""
    return load_env_layers(env_search_dirs())


def set_env_value(content: str, key: str, value: str) -> str:
    """Return `content` with `key` set to `value`, appending the key if missing."""
    pattern = re.compile(rf"^(?:export\s+)?{re.escape(key)}=.*$", re.MULTILINE)
    line = f"{key}={value}"
    if pattern.search(content):
        return pattern.sub(lambda _: line, content)
    if content and not content.endswith("\n"):
        content += "\n"
    return content + line + "\n"
