"""Source file discovery under a crawl root."""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from componentscan.models import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_GLOBS = ("**/*.js", "**/*.jsx", "**/*.ts", "**/*.tsx")

# Test files are skipped unless globs are configured explicitly
DEFAULT_IGNORED_FILES = ("*.test.*", "*.spec.*")

ALWAYS_SKIPPED_DIRS = frozenset({"node_modules", ".git"})


def _is_excluded_dir(name: str, exclude: Iterable[str | re.Pattern[str]]) -> bool:
    if name in ALWAYS_SKIPPED_DIRS:
        return True
    for rule in exclude:
        if isinstance(rule, re.Pattern):
            if rule.search(name):
                return True
        elif name == rule:
            return True
    return False


def find_files(
    crawl_from: str | Path,
    globs: Sequence[str] | None = None,
    exclude: Sequence[str | re.Pattern[str]] = (),
) -> list[Path]:
    """Collect files under ``crawl_from`` matching ``globs``, sorted by path.

    Args:
        crawl_from: Root directory.
        globs: Glob patterns relative to the root. Defaults to all
            .js/.jsx/.ts/.tsx files except ``*.test.*`` and ``*.spec.*``.
        exclude: Directory names, or compiled patterns searched in
            directory names; matching directories are skipped entirely.

    Raises:
        ConfigError: If ``crawl_from`` is not a directory.
    """
    root = Path(crawl_from)
    if not root.is_dir():
        raise ConfigError(f"crawlFrom is not a directory: {root}")

    patterns = tuple(globs) if globs else DEFAULT_GLOBS
    ignored_files = DEFAULT_IGNORED_FILES if not globs else ()

    found: set[Path] = set()
    skipped = 0

    for pattern in patterns:
        for file_path in root.glob(pattern):
            if not file_path.is_file():
                continue
            rel = file_path.relative_to(root)
            if any(_is_excluded_dir(part, exclude) for part in rel.parts[:-1]):
                skipped += 1
                continue
            if any(fnmatch.fnmatch(file_path.name, p) for p in ignored_files):
                skipped += 1
                continue
            found.add(file_path)

    logger.debug("Found %d files under %s (%d skipped)", len(found), root, skipped)
    return sorted(found)
