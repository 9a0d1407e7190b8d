"""Pydantic models for YAML configuration parsing."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, PrivateAttr, model_validator

from route_tree.net_tree import StubPolicy


class BuilderConfig(BaseModel):
    stub_policy: StubPolicy = StubPolicy.PRUNE
    workers: int = 1


class ReportConfig(BaseModel):
    show_failures_only: bool = False
    max_nets_listed: int | None = 50


class VisualizerConfig(BaseModel):
    max_nets: int | None = 200
    show_redundant: bool = True
    width: int = 1000
    height: int = 1000


class Config(BaseModel):
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    visualizer: VisualizerConfig = Field(default_factory=VisualizerConfig)

    _config_path: Path | None = PrivateAttr(default=None)

    @property
    def config_path(self) -> Path | None:
        return self._config_path

    @model_validator(mode="after")
    def validate_semantics(self) -> Config:
        if self.builder.workers < 1:
            raise ValueError("builder.workers must be >= 1")
        if self.report.max_nets_listed is not None and self.report.max_nets_listed < 0:
            raise ValueError("report.max_nets_listed must be >= 0")
        if self.visualizer.max_nets is not None and self.visualizer.max_nets < 1:
            raise ValueError("visualizer.max_nets must be >= 1")
        if self.visualizer.width <= 0 or self.visualizer.height <= 0:
            raise ValueError("visualizer.width and visualizer.height must be > 0")
        return self


def load_config(path: str | Path | None = None) -> Config:
    """Load and validate a YAML configuration file; defaults when ``path`` is None."""
    if path is None:
        return Config()

    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = Config.model_validate(raw)
    config._config_path = path
    return config
