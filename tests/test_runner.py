"""End-to-end tests for full scan runs."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

ts = pytest.importorskip("tree_sitter", reason="tree-sitter not installed")

from componentscan import (  # noqa: E402
    ProcessorSpec,
    Report,
    ScannerConfig,
    UnknownNameNodeError,
    run,
)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a small React project."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.jsx").write_text(
        'import { Button, Menu } from "@acme/ui";\n'
        "\n"
        "export const App = () => (\n"
        "  <Menu>\n"
        '    <Menu.Item key="a" />\n'
        '    <Button size="sm" onClick={save} />\n'
        "  </Menu>\n"
        ");\n"
    )
    (src / "Form.tsx").write_text(
        'import { Button as Btn } from "@acme/ui";\n'
        'import { Field } from "./Field";\n'
        "\n"
        "export function Form(): JSX.Element {\n"
        "  return <Field label={<Btn />} {...rest} />;\n"
        "}\n"
    )
    (src / "Broken.jsx").write_text("<Button />\n)))\n")
    return tmp_path


def config_for(project: Path, **kwargs) -> ScannerConfig:
    return ScannerConfig(crawl_from=project / "src", **kwargs)


class TestRun:
    def test_aggregates_files(self, project: Path) -> None:
        result = run(config_for(project), write=False)

        buttons = result.report.get("Button").instances
        assert [Path(i.location.file).name for i in buttons] == ["App.jsx", "Form.tsx"]
        assert buttons[0].props == {"size": "sm", "onClick": "(Identifier)"}
        assert result.report.get("Field").instances[0].props_spread is True

    def test_stats(self, project: Path) -> None:
        result = run(config_for(project), write=False)

        stats = result.stats
        assert stats.files_found == 3
        assert stats.files_scanned == 2
        assert stats.parse_failures == [str(project / "src" / "Broken.jsx")]
        assert stats.files_skipped == 1
        assert stats.instance_count == 4
        assert "Scanned 2/3 files" in stats.format_summary()
        assert "Broken.jsx" in stats.format_summary()

    def test_filters_from_config(self, project: Path) -> None:
        config = config_for(
            project,
            components=["Menu"],
            include_sub_components=True,
            imported_from="@acme/ui",
        )

        result = run(config, write=False)

        assert list(result.report.components) == ["Menu"]
        assert result.report.get("Menu.Item") is not None

    def test_default_processor_output(self, project: Path) -> None:
        result = run(config_for(project), write=False)

        assert [o.name for o in result.outputs] == ["count-components-and-props"]
        assert result.outputs[0].data["Button"]["instances"] == 2

    def test_writes_outputs(self, project: Path) -> None:
        target = project / "out" / "counts.json"
        config = config_for(project, processors=[ProcessorSpec("count-components", target)])

        run(config)

        assert json.loads(target.read_text()) == {"Button": 2, "Menu": 1, "Field": 1}

    def test_existing_report_extended(self, project: Path) -> None:
        report = Report()
        report.get_or_create(["Legacy"])

        result = run(config_for(project), report=report, write=False)

        assert result.report is report
        assert list(report.components)[0] == "Legacy"

    def test_unexpected_node_aborts(self, project: Path) -> None:
        (project / "src" / "Icon.jsx").write_text("<svg:rect />;\n")

        with pytest.raises(UnknownNameNodeError):
            run(config_for(project), write=False)
