"""Report processors: turn a Report into output documents.

Built-in processors:
    count-components            {"Button": 12, "Icon": 3}
    count-components-and-props  {"Button": {"instances": 12, "props": {"size": 4}}}
    raw-report                  the full report tree
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from componentscan.models import ConfigError, Report

logger = logging.getLogger(__name__)

Processor = Callable[[Report], Any]

DEFAULT_PROCESSORS = ("count-components-and-props",)


def _sorted_by_count(counts: dict[str, Any], key: Callable[[Any], int]) -> dict[str, Any]:
    # Stable sort keeps discovery order among equal counts
    return dict(sorted(counts.items(), key=lambda item: key(item[1]), reverse=True))


def count_components(report: Report) -> dict[str, int]:
    """Instance count per dotted component name, most used first."""
    counts = {
        name: len(node.instances)
        for name, node in report.iter_components()
        if node.instances
    }
    return _sorted_by_count(counts, key=lambda count: count)


def count_components_and_props(report: Report) -> dict[str, dict[str, Any]]:
    """Instance count and per-prop usage count per component, most used first."""
    result: dict[str, dict[str, Any]] = {}

    for name, node in report.iter_components():
        if not node.instances:
            continue
        prop_counts: dict[str, int] = {}
        for instance in node.instances:
            for prop_name in instance.props:
                prop_counts[prop_name] = prop_counts.get(prop_name, 0) + 1
        result[name] = {
            "instances": len(node.instances),
            "props": _sorted_by_count(prop_counts, key=lambda count: count),
        }

    return _sorted_by_count(result, key=lambda entry: entry["instances"])


def raw_report(report: Report) -> dict[str, Any]:
    """The whole report tree as JSON-compatible data."""
    return report.to_dict()


PROCESSORS: dict[str, Processor] = {
    "count-components": count_components,
    "count-components-and-props": count_components_and_props,
    "raw-report": raw_report,
}


@dataclass(frozen=True)
class ProcessorSpec:
    """A processor to run and where its output goes (None = stdout)."""

    name: str
    output_to: Path | None = None

    @classmethod
    def parse(cls, value: Any, base_dir: Path | None = None) -> ProcessorSpec:
        """Parse ``"name"`` or ``["name", {"outputTo": "path"}]``."""
        if isinstance(value, str):
            spec = cls(value)
        elif (
            isinstance(value, list)
            and len(value) == 2
            and isinstance(value[0], str)
            and isinstance(value[1], dict)
        ):
            output_to = value[1].get("outputTo")
            path = None
            if output_to is not None:
                path = Path(output_to)
                if base_dir is not None and not path.is_absolute():
                    path = base_dir / path
            spec = cls(value[0], path)
        else:
            raise ConfigError(f"Invalid processor entry: {value!r}")

        if spec.name not in PROCESSORS:
            raise ConfigError(
                f"Unknown processor: {spec.name} "
                f"(available: {', '.join(sorted(PROCESSORS))})"
            )
        return spec


@dataclass
class ProcessorOutput:
    """Result of one processor run."""

    name: str
    data: Any
    output_to: Path | None = None


def write_output(output: ProcessorOutput) -> None:
    """Write processor data as JSON to its file, or to stdout."""
    text = json.dumps(output.data, indent=2)

    if output.output_to is None:
        sys.stdout.write(text + "\n")
        return

    output.output_to.parent.mkdir(parents=True, exist_ok=True)
    output.output_to.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s to %s", output.name, output.output_to)


def run_processors(
    report: Report,
    processors: list[ProcessorSpec],
    write: bool = True,
) -> list[ProcessorOutput]:
    """Run processors in order; optionally write each output."""
    outputs = []
    for spec in processors:
        output = ProcessorOutput(
            name=spec.name,
            data=PROCESSORS[spec.name](report),
            output_to=spec.output_to,
        )
        if write:
            write_output(output)
        outputs.append(output)
    return outputs
