"""
Configuration Management

Loads configuration from YAML files with environment variable resolution.
"""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


class GraphConfig(BaseModel):
    """Introduction path search configuration."""
    max_depth: int = Field(default=4, ge=0)
    max_paths: int = Field(default=5, ge=0)
    candidate_cap: int = Field(default=500, ge=1)


class ConnectorsConfig(BaseModel):
    """Connector ranking configuration."""
    top_n: int = Field(default=10, ge=0)
    min_degree: int = Field(default=0, ge=0)
    normalized: bool = True
    sample_size: Optional[int] = Field(default=None, ge=0)
    seed: Optional[int] = None
    workers: int = Field(default=1, ge=1)


class MetricsConfig(BaseModel):
    """Network summary configuration."""
    key_connectors: int = Field(default=5, ge=0)
    path_length_sample: int = Field(default=50, ge=0)
    community_max_iterations: int = Field(default=10, ge=1)


class ResolutionConfig(BaseModel):
    """Name-based connection resolution configuration."""
    enabled: bool = False
    fuzzy_threshold: float = Field(default=0.7, ge=0.0, le=1.0)


class MarkdownConfig(BaseModel):
    """Markdown report configuration."""
    include_methodology: bool = True
    max_items_per_section: int = Field(default=20, ge=1)


class OutputConfig(BaseModel):
    """Output generation configuration."""
    directory: str = "./outputs"
    formats: list[str] = Field(default_factory=lambda: ["csv", "markdown", "json"])
    timestamp_filenames: bool = True
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None


class Config(BaseModel):
    """Root configuration object."""
    graph: GraphConfig = Field(default_factory=GraphConfig)
    connectors: ConnectorsConfig = Field(default_factory=ConnectorsConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


CONFIG_ENV_VAR = "NETWORK_GRAPH_CONFIG"

# ${VAR} or ${VAR:-default}, anywhere inside a string value
ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def _substitute(match: re.Match) -> str:
    name = match.group("name")
    default = match.group("default")
    if name in os.environ:
        return os.environ[name]
    return default if default is not None else match.group(0)


def _resolve_env_vars(data: Any) -> Any:
    """Expand ${VAR} and ${VAR:-default} references in every string value.

    References to unset variables without a default are left as written.
    """
    if isinstance(data, str):
        return ENV_REFERENCE.sub(_substitute, data)
    if isinstance(data, dict):
        return {key: _resolve_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_resolve_env_vars(item) for item in data]
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into a copy of base; nested sections merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, treating a missing or empty file as {}."""
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    config_path: Optional[Path] = None,
    local_config_path: Optional[Path] = None,
) -> Config:
    """Load configuration from YAML files.

    The main file defaults to $NETWORK_GRAPH_CONFIG, falling back to
    config.yaml at the project root. Local overrides are read from
    config.local.yaml beside the main file.

    Args:
        config_path: Path to main config file
        local_config_path: Path to local overrides

    Returns:
        Merged and validated Config object

    Raises:
        ValueError: If a config file is not a YAML mapping
        pydantic.ValidationError: If a value is out of range
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        else:
            config_path = Path(__file__).parent.parent.parent / "config.yaml"
    if local_config_path is None:
        local_config_path = config_path.parent / "config.local.yaml"

    config_data = _deep_merge(_read_yaml(config_path), _read_yaml(local_config_path))

    return Config(**_resolve_env_vars(config_data))
