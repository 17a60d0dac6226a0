"""Configuration management for the annotation engine."""

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .engines.base import DEFAULT_ABBREVIATIONS
from .rules.base import Category, Stage


class SegmentationConfig(BaseModel):
    """Configuration for sentence splitting."""

    engine: Literal["abbrev", "lookbehind"] = "abbrev"
    abbreviations: List[str] = Field(default_factory=lambda: sorted(DEFAULT_ABBREVIATIONS))


class HighlightFilters(BaseModel):
    """Which rules run and which pieces are shown.

    Filters only narrow the rule table; they never change it.
    """

    stages: List[Stage] = Field(default_factory=lambda: [Stage.JH, Stage.SH])
    categories: List[Category] = Field(default_factory=list)  # empty = all
    query: str = ""
    grammar_only: bool = False
    include_roles: bool = True


class CheckerConfig(BaseModel):
    """Configuration for preparing text for an external checker."""

    max_chars_per_chunk: int = Field(default=380, ge=1)


class QuizConfig(BaseModel):
    """Configuration for quiz generation."""

    max_options: int = Field(default=4, ge=2)
    blank: str = "_____"
    choice_instruction: str = "Choose the sentence pattern:"


class OutputConfig(BaseModel):
    """Configuration for output options."""

    output_path: Path = Path("output/annotations.json")
    format: Literal["json", "csv"] = "json"
    top_goals: int = Field(default=6, ge=1)

    @field_validator("output_path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v


class Config(BaseModel):
    """Main configuration for the annotation pipeline."""

    input_file: Optional[Path] = None
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    filters: HighlightFilters = Field(default_factory=HighlightFilters)
    checker: CheckerConfig = Field(default_factory=CheckerConfig)
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("input_file", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)
