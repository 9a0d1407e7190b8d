from __future__ import annotations

import json

import pytest
from click.testing import CliRunner
from pydantic import ValidationError

from route_tree.cli import app
from route_tree.config import Config, ReportConfig, load_config
from route_tree.design_parser import parse_design_text
from route_tree.net_tree import StubPolicy
from route_tree.reconstruct import reconstruct_design
from route_tree.reporter import generate_report, outcomes_to_json
from route_tree.visualize import build_figure


@pytest.fixture
def parsed(design_text):
    design = parse_design_text(design_text)
    return design, reconstruct_design(design)


class TestConfig:
    def test_defaults(self):
        config = load_config(None)
        assert config.builder.stub_policy is StubPolicy.PRUNE
        assert config.builder.workers == 1
        assert config.config_path is None

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("builder:\n  stub_policy: keep\n  workers: 4\nreport:\n  show_failures_only: true\n")
        config = load_config(path)
        assert config.builder.stub_policy is StubPolicy.KEEP
        assert config.builder.workers == 4
        assert config.report.show_failures_only
        assert config.config_path == path

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).visualizer.show_redundant

    @pytest.mark.parametrize(
        "raw",
        [
            {"builder": {"workers": 0}},
            {"builder": {"stub_policy": "ignore"}},
            {"report": {"max_nets_listed": -1}},
            {"visualizer": {"width": 0}},
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            Config.model_validate(raw)


class TestReport:
    def test_summary(self, parsed):
        design, outcomes = parsed
        text = generate_report(design, outcomes)
        assert "GGrid Size (rows x cols): 5 x 5" in text
        assert "Nets Built: 2" in text
        assert "Nets Failed: 1" in text
        assert "Redundant Segments Dropped: 1" in text
        assert "Stub Segments Pruned: 1" in text
        assert "InvalidSegment: 1" in text
        assert "N3: FAILED [InvalidSegment]" in text

    def test_failures_only_and_limit(self, parsed):
        design, outcomes = parsed
        config = Config(report=ReportConfig(show_failures_only=True))
        text = generate_report(design, outcomes, config)
        assert "  - N1:" not in text
        assert "  - N3:" in text

        config = Config(report=ReportConfig(max_nets_listed=1))
        text = generate_report(design, outcomes, config)
        assert "... 2 more" in text

    def test_json(self, parsed):
        _, outcomes = parsed
        data = outcomes_to_json(outcomes)
        assert [d["status"] for d in data] == ["ok", "ok", "failed"]
        json.dumps(data)


def test_figure(parsed):
    design, outcomes = parsed
    fig = build_figure(design, outcomes)
    names = [trace.name for trace in fig.data]
    assert "GGrid Boundary" in names
    assert "N1" in names
    assert "N3 (InvalidSegment)" in names


class TestCli:
    def test_run(self, design_file, tmp_path):
        out = tmp_path / "out"
        result = CliRunner().invoke(app, [str(design_file), "--output-dir", str(out), "--viz"])
        assert result.exit_code == 0, result.output
        assert "2 built, 1 failed" in result.output
        assert (out / "route_tree_summary.txt").exists()
        assert (out / "route_tree_visualization.html").exists()
        data = json.loads((out / "route_tree_nets.json").read_text())
        assert len(data) == 3

    def test_strict(self, design_file, tmp_path):
        result = CliRunner().invoke(
            app, [str(design_file), "--output-dir", str(tmp_path), "--strict", "--no-report"]
        )
        assert result.exit_code == 1

    def test_with_config(self, design_file, tmp_path):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("builder:\n  stub_policy: keep\n")
        result = CliRunner().invoke(
            app,
            [str(design_file), "--config", str(cfg), "--output-dir", str(tmp_path), "--no-json"],
        )
        assert result.exit_code == 0, result.output
        assert "Stub Policy: keep" in result.output
        assert not (tmp_path / "route_tree_nets.json").exists()

    def test_parse_error(self, tmp_path):
        bad = tmp_path / "bad.txt"
        bad.write_text("MaxCellMove x\n")
        result = CliRunner().invoke(app, [str(bad), "--output-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "expected integer" in result.output
