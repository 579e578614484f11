"""
Configuration management for ContentQuarry using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Set

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class ScoringThresholds(BaseModel):
    """Tunable constants of the scoring and sibling-merging heuristics."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    min_paragraph_length: int = Field(default=25, description="Minimum text length for a paragraph to be scored.")
    chars_per_length_point: int = Field(default=100, description="Characters per paragraph length bonus point.")
    max_length_points: int = Field(default=3, description="Cap on paragraph length bonus points.")
    class_weight: float = Field(default=25.0, description="Weight added or removed per class/id keyword match.")
    grandparent_divider: float = Field(default=2.0, description="Divider applied to the grandparent's share.")
    sibling_score_ratio: float = Field(default=0.2, description="Share of the top score a sibling must reach.")
    sibling_min_threshold: float = Field(default=10.0, description="Floor of the sibling score threshold.")
    sibling_paragraph_length: int = Field(default=80, description="Length splitting long and short sibling paragraphs.")
    sibling_paragraph_link_density: float = Field(default=0.25, description="Max link density of a long sibling paragraph.")
    max_viable_link_density: float = Field(default=0.6, description="Candidates above this link density are skipped.")
    navigation_link_density: float = Field(default=0.3, description="Max link density of nav-like candidates.")
    conditional_clean_max_length: int = Field(default=600, description="Nodes longer than this are never cleaned.")
    viable_min_text_length: int = Field(default=150, description="Candidates shorter than this need viable_min_score.")
    viable_min_score: float = Field(default=50.0, description="Score that makes a short candidate viable.")
    shared_parent_min_candidates: int = Field(
        default=3, description="Strong runners-up that must share an ancestor for it to be promoted."
    )
    shared_parent_score_ratio: float = Field(default=0.75, description="Share of the top score a runner-up must reach.")
    semantic_parent_score_divider: float = Field(
        default=3.0, description="Divider of the top score below which semantic parents stop the climb."
    )
    semantic_parent_max_link_density: float = Field(default=0.33, description="Max link density of a semantic parent.")
    dense_child_scan: int = Field(default=20, description="Ranked candidates searched for a dense wrapper child.")
    dense_child_min_text_length: int = Field(default=160, description="Minimum text length of a dense wrapper child.")
    dense_child_max_link_density: float = Field(default=0.35, description="Max link density of a dense wrapper child.")
    dense_child_link_density_margin: float = Field(
        default=0.15, description="How much lower the child's link density must be than the wrapper's."
    )
    dense_child_bare_text_length: int = Field(
        default=300, description="Minimum text length of a dense child without paragraphs."
    )
    dense_child_score_ratio: float = Field(default=0.45, description="Share of the wrapper score the child must reach.")
    semantic_descendant_scan: int = Field(
        default=40, description="Ranked candidates searched for a semantic descendant."
    )
    semantic_descendant_min_text_length: int = Field(
        default=200, description="Minimum text length of a semantic descendant."
    )
    semantic_descendant_max_link_density: float = Field(
        default=0.45, description="Max link density of a semantic descendant."
    )
    semantic_descendant_score_ratio: float = Field(
        default=0.4, description="Share of the top score a semantic descendant must reach."
    )

    @field_validator(
        "sibling_score_ratio",
        "sibling_paragraph_link_density",
        "max_viable_link_density",
        "navigation_link_density",
        "shared_parent_score_ratio",
        "semantic_parent_max_link_density",
        "dense_child_max_link_density",
        "dense_child_link_density_margin",
        "dense_child_score_ratio",
        "semantic_descendant_max_link_density",
        "semantic_descendant_score_ratio",
    )
    @classmethod
    def validate_ratio(cls, v: float) -> float:
        """Ensure ratios stay within [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("ratio must be between 0.0 and 1.0")
        return v


class ParserConfig(BaseModel):
    """Options of a single ``Readability`` parser.

    Fields are snake_case and also accept their camelCase aliases
    (``charThreshold``, ``nbTopCandidates`` ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    debug: bool = Field(default=False, description="Emit per-attempt debug events.")
    char_threshold: int = Field(default=500, description="Minimum text length for an article to be accepted.")
    nb_top_candidates: int = Field(default=5, description="Size of the candidate pool.")
    keep_classes: bool = Field(default=False, description="Skip class attribute stripping entirely.")
    classes_to_preserve: Set[str] = Field(default_factory=lambda: {"page"}, description="Classes kept when stripping.")
    disable_json_ld: bool = Field(default=False, description="Ignore JSON-LD in the metadata chain.")
    link_density_modifier: float = Field(default=0.0, description="Added to 1 - link density in the score penalty.")
    remove_title_heading: bool = Field(default=True, description="Drop the heading that repeats the title.")
    thresholds: ScoringThresholds = Field(default_factory=ScoringThresholds)

    @field_validator("char_threshold")
    @classmethod
    def validate_char_threshold(cls, v: int) -> int:
        if v < 0:
            raise ValueError("char_threshold must not be negative")
        return v

    @field_validator("nb_top_candidates")
    @classmethod
    def validate_nb_top_candidates(cls, v: int) -> int:
        if v < 1:
            raise ValueError("nb_top_candidates must be at least 1")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    enabled: bool = True
    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "ContentQuarry"
    version: str = "0.1.0"
    parser: ParserConfig = Field(default_factory=ParserConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="CONTENTQUARRY_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "contentquarry.yaml",
        current_dir / "contentquarry.yml",
        current_dir / "config.yaml",
        current_dir / "config.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None
