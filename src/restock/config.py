"""Configuration management for Restock."""

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .matcher import DUTCH_RULES, MatchRules


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path


@dataclass
class PredictionConfig:
    """Cadence estimation and restock timing."""

    buffer_seconds: float = 30
    min_events: int = 3
    recheck_window_seconds: float = 3600
    expected_limit: int = 5
    snooze_hours: float = 24
    snooze_factor: float = 1.05
    max_correction_factor: float = 2.0


@dataclass
class SuggestionsConfig:
    """Suggestion chip configuration."""

    max_suggestions: int = 8


@dataclass
class MatchingConfig:
    """Product search and match acceptance thresholds."""

    search_threshold: float = 0.3
    accept_score: float = 0.25
    accept_overlap: float = 0.70
    accept_overlap_without_score: float = 0.85

    def rules(self, base: MatchRules = DUTCH_RULES) -> MatchRules:
        """Locale rules with these thresholds applied."""
        return dataclasses.replace(
            base,
            accept_max_score=self.accept_score,
            accept_min_overlap=self.accept_overlap,
            accept_min_overlap_without_score=self.accept_overlap_without_score,
        )


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    prediction: PredictionConfig
    suggestions: SuggestionsConfig
    matching: MatchingConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def prediction(self) -> PredictionConfig:
        """Get prediction configuration."""
        return self._config.prediction

    @property
    def suggestions(self) -> SuggestionsConfig:
        """Get suggestions configuration."""
        return self._config.suggestions

    @property
    def matching(self) -> MatchingConfig:
        """Get matching configuration."""
        return self._config.matching

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "restock" / "config.toml",
            Path.home() / ".restock" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "restock" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        prediction = data.get("prediction", {})
        matching = data.get("matching", {})
        defaults = PredictionConfig()
        match_defaults = MatchingConfig()

        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data.get("data", {}).get("storage_dir", "~/restock/data")
                ).expanduser(),
            ),
            prediction=PredictionConfig(
                buffer_seconds=prediction.get("buffer_seconds", defaults.buffer_seconds),
                min_events=prediction.get("min_events", defaults.min_events),
                recheck_window_seconds=prediction.get(
                    "recheck_window_seconds", defaults.recheck_window_seconds
                ),
                expected_limit=prediction.get("expected_limit", defaults.expected_limit),
                snooze_hours=prediction.get("snooze_hours", defaults.snooze_hours),
                snooze_factor=prediction.get("snooze_factor", defaults.snooze_factor),
                max_correction_factor=prediction.get(
                    "max_correction_factor", defaults.max_correction_factor
                ),
            ),
            suggestions=SuggestionsConfig(
                max_suggestions=data.get("suggestions", {}).get(
                    "max_suggestions", SuggestionsConfig().max_suggestions
                ),
            ),
            matching=MatchingConfig(
                search_threshold=matching.get("search_threshold", match_defaults.search_threshold),
                accept_score=matching.get("accept_score", match_defaults.accept_score),
                accept_overlap=matching.get("accept_overlap", match_defaults.accept_overlap),
                accept_overlap_without_score=matching.get(
                    "accept_overlap_without_score", match_defaults.accept_overlap_without_score
                ),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "restock" / "data"),
            prediction=PredictionConfig(),
            suggestions=SuggestionsConfig(),
            matching=MatchingConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'prediction.snooze_hours'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default
