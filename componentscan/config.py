"""Scanner configuration loaded from a JSON file.

Example ``componentscan.json``::

    {
      "crawlFrom": "./src",
      "includeSubComponents": true,
      "importedFrom": "/^@acme\\/ui/",
      "components": ["Button", "Menu.Item"],
      "exclude": ["utils", "/^__generated__$/"],
      "globs": ["**/*.tsx"],
      "processors": [
        "count-components",
        ["raw-report", {"outputTo": "./reports/raw.json"}]
      ]
    }

Relative paths are resolved against the config file's directory (or
``rootDir`` when given). Strings written as ``/pattern/flags`` become
regular expressions.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from componentscan.models import ConfigError
from componentscan.processors import DEFAULT_PROCESSORS, ProcessorSpec
from componentscan.scanner import ScanOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "componentscan.json"

_REGEX_LITERAL = re.compile(r"^/(.+)/([a-z]*)$", re.DOTALL)
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}

_KNOWN_KEYS = frozenset(
    {
        "crawlFrom",
        "rootDir",
        "components",
        "includeSubComponents",
        "importedFrom",
        "exclude",
        "globs",
        "processors",
    }
)


def parse_pattern(value: str) -> str | re.Pattern[str]:
    """Compile ``/pattern/flags`` into a regex; other strings stay as-is.

    The ``g``, ``u`` and ``y`` flags have no Python meaning and are ignored.
    """
    match = _REGEX_LITERAL.match(value)
    if match is None:
        return value

    pattern, flags = match.groups()
    re_flags = 0
    for flag in flags:
        re_flags |= _REGEX_FLAGS.get(flag, 0)
    try:
        return re.compile(pattern, re_flags)
    except re.error as e:
        raise ConfigError(f"Invalid regular expression {value!r}: {e}") from e


@dataclass
class ScannerConfig:
    """Settings for a full run: what to crawl, how to scan, what to output."""

    crawl_from: Path
    components: list[str] | None = None
    include_sub_components: bool = False
    imported_from: str | re.Pattern[str] | None = None
    exclude: list[str | re.Pattern[str]] = field(default_factory=list)
    globs: list[str] | None = None
    processors: list[ProcessorSpec] = field(
        default_factory=lambda: [ProcessorSpec(name) for name in DEFAULT_PROCESSORS]
    )

    @classmethod
    def load(cls, config_path: str | Path) -> ScannerConfig:
        """Load a JSON config file."""
        config_path = Path(config_path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {config_path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to read config {config_path}: {e}") from e

        return cls.from_dict(data, base_dir=config_path.resolve().parent)

    @classmethod
    def from_dict(cls, data: Any, base_dir: Path | None = None) -> ScannerConfig:
        """Build a config from parsed JSON data.

        Raises:
            ConfigError: If ``crawlFrom`` is missing or a value has the
                wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError("Config must be a JSON object")

        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))

        base = base_dir or Path.cwd()
        if "rootDir" in data:
            base = _resolve(_expect(data, "rootDir", str), base)

        if "crawlFrom" not in data:
            raise ConfigError("Config is missing required key: crawlFrom")

        config = cls(crawl_from=_resolve(_expect(data, "crawlFrom", str), base))

        if "components" in data:
            config.components = _parse_components(data["components"])
        if "includeSubComponents" in data:
            config.include_sub_components = _expect(data, "includeSubComponents", bool)
        if data.get("importedFrom"):
            config.imported_from = parse_pattern(_expect(data, "importedFrom", str))
        if "exclude" in data:
            config.exclude = [
                parse_pattern(item) for item in _expect_str_list(data, "exclude")
            ]
        if "globs" in data:
            config.globs = _expect_str_list(data, "globs")
        if "processors" in data:
            processors = _expect(data, "processors", list)
            config.processors = [ProcessorSpec.parse(p, base) for p in processors]

        return config

    def to_scan_options(self) -> ScanOptions:
        return ScanOptions(
            components=set(self.components) if self.components is not None else None,
            include_sub_components=self.include_sub_components,
            imported_from=self.imported_from,
        )


def _resolve(value: str, base: Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (base / path).resolve()


def _expect(data: dict[str, Any], key: str, expected: type) -> Any:
    value = data[key]
    if not isinstance(value, expected):
        raise ConfigError(
            f"Config key {key!r} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _expect_str_list(data: dict[str, Any], key: str) -> list[str]:
    value = _expect(data, key, list)
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"Config key {key!r} must be a list of strings")
    return value


def _parse_components(value: Any) -> list[str]:
    # Accepts ["Button", ...] or {"Button": true, ...}
    if isinstance(value, dict):
        return list(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise ConfigError("Config key 'components' must be a list or object of names")
