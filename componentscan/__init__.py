"""
componentscan: UI component usage reports for JSX/TSX codebases

Usage:
    import componentscan

    # Scan source text into a shared report
    report = componentscan.Report()
    componentscan.scan(code, "src/App.tsx", report)

    # Restrict what gets recorded
    options = componentscan.ScanOptions(
        components={"Button", "Menu"},
        include_sub_components=True,
        imported_from=re.compile(r"^@acme/ui"),
    )
    componentscan.scan_file("src/App.tsx", report, options)

    # Whole project, driven by a config file
    config = componentscan.ScannerConfig.load("componentscan.json")
    result = componentscan.run(config)
"""

from __future__ import annotations

from componentscan.config import ScannerConfig
from componentscan.discovery import find_files
from componentscan.models import (
    ComponentNode,
    ConfigError,
    ImportKind,
    ImportRecord,
    InstanceRecord,
    ParseError,
    Placeholder,
    PropValue,
    Report,
    ScanError,
    SourceLocation,
    UnexpectedNodeError,
    UnknownAttributeValueError,
    UnknownImportSpecifierError,
    UnknownNameNodeError,
    UnrecognizedStyledShapeError,
    VisitResult,
)
from componentscan.names import default_resolve_alias
from componentscan.processors import ProcessorSpec, run_processors
from componentscan.props import PropContext, default_extract_prop
from componentscan.runner import RunResult, RunStats, run
from componentscan.scanner import ScanOptions, scan, scan_file

__version__ = "0.1.0"

__all__ = [
    "ComponentNode",
    "ConfigError",
    "ImportKind",
    "ImportRecord",
    "InstanceRecord",
    "ParseError",
    "Placeholder",
    "ProcessorSpec",
    "PropContext",
    "PropValue",
    "Report",
    "RunResult",
    "RunStats",
    "ScanError",
    "ScanOptions",
    "ScannerConfig",
    "SourceLocation",
    "UnexpectedNodeError",
    "UnknownAttributeValueError",
    "UnknownImportSpecifierError",
    "UnknownNameNodeError",
    "UnrecognizedStyledShapeError",
    "VisitResult",
    "default_extract_prop",
    "default_resolve_alias",
    "find_files",
    "run",
    "run_processors",
    "scan",
    "scan_file",
]
