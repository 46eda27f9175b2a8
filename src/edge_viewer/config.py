"""
Edge Viewer Configuration
=========================

This module handles configuration loading for the edge viewer.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    EDGE_VIEWER_WIDTH       -> display.width
    EDGE_VIEWER_HEIGHT      -> display.height
    EDGE_VIEWER_TICK_RATE   -> simulation.tick_rate_hz
    EDGE_VIEWER_SEED        -> simulation.seed
    EDGE_VIEWER_SAMPLE_DIR  -> sample.search_dir
    EDGE_VIEWER_EXPORT_DIR  -> export.output_dir
    EDGE_VIEWER_LOG_LEVEL   -> logging.level

Nothing is loaded at import time; the caller builds settings explicitly
and passes them to the components that need them.

Example:
    from edge_viewer.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.display.resolution_label)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from edge_viewer.imaging.loader import DEFAULT_SAMPLE_CANDIDATES
from edge_viewer.simulation.clock import (
    DEFAULT_PROCESSING_TIME_RANGE_MS,
    DEFAULT_TICK_RATE_HZ,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class DisplayConfig(BaseModel):
    """Display surface configuration."""

    width: int = Field(default=640, ge=1, description="Display width in pixels")
    height: int = Field(default=480, ge=1, description="Display height in pixels")

    @property
    def resolution_label(self) -> str:
        return f"{self.width}x{self.height}"


class SimulationConfig(BaseModel):
    """Frame statistics simulation configuration."""

    tick_rate_hz: float = Field(
        default=DEFAULT_TICK_RATE_HZ,
        gt=0,
        description="Nominal simulated frames per second",
    )
    processing_time_min_ms: float = Field(
        default=DEFAULT_PROCESSING_TIME_RANGE_MS[0],
        ge=0,
        description="Lower bound of simulated processing time",
    )
    processing_time_max_ms: float = Field(
        default=DEFAULT_PROCESSING_TIME_RANGE_MS[1],
        ge=0,
        description="Upper bound (exclusive) of simulated processing time",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for processing time and sample noise (None = random)",
    )

    @model_validator(mode="after")
    def _check_range(self) -> "SimulationConfig":
        if self.processing_time_max_ms < self.processing_time_min_ms:
            raise ValueError("processing_time_max_ms must be >= processing_time_min_ms")
        return self


class SampleConfig(BaseModel):
    """Sample image lookup configuration."""

    search_dir: str = Field(
        default=".",
        description="Directory searched for sample image candidates",
    )
    candidates: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SAMPLE_CANDIDATES),
        description="Sample file names, tried in order",
    )

    def candidate_paths(self) -> List[Path]:
        base = Path(self.search_dir)
        return [base / name for name in self.candidates]


class ExportConfig(BaseModel):
    """Frame export configuration."""

    output_dir: str = Field(
        default="./exports",
        description="Directory for exported side-by-side PNGs",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the edge viewer.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    display: DisplayConfig = Field(default_factory=DisplayConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    sample: SampleConfig = Field(default_factory=SampleConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        for path in (Path("config.yaml"), Path("config.yml")):
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
        # A bare "section:" line means that section's defaults
        config_data = {key: value for key, value in config_data.items() if value is not None}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _section(config_data: dict, name: str) -> dict:
    """Return a mutable config section, replacing a blank YAML entry."""
    section = config_data.get(name) or {}
    config_data[name] = section
    return section


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Display settings
    if env_width := os.environ.get("EDGE_VIEWER_WIDTH"):
        _section(config_data, "display")["width"] = int(env_width)
    if env_height := os.environ.get("EDGE_VIEWER_HEIGHT"):
        _section(config_data, "display")["height"] = int(env_height)

    # Simulation settings
    if env_rate := os.environ.get("EDGE_VIEWER_TICK_RATE"):
        _section(config_data, "simulation")["tick_rate_hz"] = float(env_rate)
    if env_seed := os.environ.get("EDGE_VIEWER_SEED"):
        _section(config_data, "simulation")["seed"] = int(env_seed)

    # Paths
    if env_sample := os.environ.get("EDGE_VIEWER_SAMPLE_DIR"):
        _section(config_data, "sample")["search_dir"] = env_sample
    if env_export := os.environ.get("EDGE_VIEWER_EXPORT_DIR"):
        _section(config_data, "export")["output_dir"] = env_export

    # Logging settings
    if env_log := os.environ.get("EDGE_VIEWER_LOG_LEVEL"):
        _section(config_data, "logging")["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
