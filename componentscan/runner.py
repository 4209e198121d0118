"""Full scan runs: discover files, scan them into one report, process it."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from componentscan.config import ScannerConfig
from componentscan.discovery import find_files
from componentscan.models import Report
from componentscan.processors import ProcessorOutput, run_processors
from componentscan.scanner import scan

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Statistics collected during a run."""

    crawl_from: Path
    files_found: int = 0
    files_scanned: int = 0
    parse_failures: list[str] = field(default_factory=list)
    read_failures: list[str] = field(default_factory=list)
    instance_count: int = 0
    total_time_ms: float = 0.0

    @property
    def files_skipped(self) -> int:
        return len(self.parse_failures) + len(self.read_failures)

    def format_summary(self) -> str:
        lines = [
            f"Scanned {self.files_scanned}/{self.files_found} files "
            f"in {self.crawl_from} ({self.total_time_ms:.0f}ms)",
            f"  Instances: {self.instance_count}",
        ]
        if self.parse_failures:
            lines.append(f"  Parse failures: {len(self.parse_failures)}")
            lines.extend(f"    {path}" for path in self.parse_failures)
        if self.read_failures:
            lines.append(f"  Unreadable files: {len(self.read_failures)}")
        return "\n".join(lines)


@dataclass
class RunResult:
    report: Report
    stats: RunStats
    outputs: list[ProcessorOutput] = field(default_factory=list)


def run(
    config: ScannerConfig,
    report: Report | None = None,
    write: bool = True,
) -> RunResult:
    """Scan every discovered file into one report and run the processors.

    Files are scanned one after another in path order. Unparseable or
    unreadable files are skipped and listed in the stats.

    Args:
        config: What to crawl and how.
        report: Report to aggregate into; a new one by default.
        write: Write processor outputs to stdout/files.

    Raises:
        UnexpectedNodeError: Propagated from the scanner; aborts the run.
        ConfigError: If the crawl root does not exist.
    """
    start = time.perf_counter()
    report = report if report is not None else Report()
    options = config.to_scan_options()
    stats = RunStats(crawl_from=config.crawl_from)

    files = find_files(config.crawl_from, config.globs, config.exclude)
    stats.files_found = len(files)

    for file_path in files:
        try:
            source = file_path.read_bytes()
        except OSError as e:
            logger.warning("Failed to read %s: %s", file_path, e)
            stats.read_failures.append(str(file_path))
            continue

        if scan(source, str(file_path), report, options):
            stats.files_scanned += 1
        else:
            stats.parse_failures.append(str(file_path))

    stats.instance_count = report.instance_count()
    outputs = run_processors(report, config.processors, write=write)
    stats.total_time_ms = (time.perf_counter() - start) * 1000

    return RunResult(report=report, stats=stats, outputs=outputs)
