"""
Configuration management and loading.

Handles tracker settings from YAML files and command-line overrides.
"""

import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Pattern

import yaml

DEFAULT_HEADER_FORMAT = "Total: #{total} Today: #{today}#{goal}"
DEFAULT_GOAL_FORMAT = " Goal: #{target}(#{remaining})"
DEFAULT_ITEM_FORMAT = "#{path}: #{total} (#{today})"
DEFAULT_ANNOTATION_PATTERN = r"#.*$"


@dataclass(frozen=True)
class TrackerConfig:
    """Complete tracker configuration.

    Passed explicitly to the scanner and the report formatter.
    """
    database: str = "./wc.db"
    goal: int = 0
    annotation_pattern: str = DEFAULT_ANNOTATION_PATTERN
    accept_file_pattern: str = ""
    ignore_file_pattern: str = ""
    update_hook: str = ""
    format_header: str = DEFAULT_HEADER_FORMAT
    format_goal: str = DEFAULT_GOAL_FORMAT
    format_item: str = DEFAULT_ITEM_FORMAT

    def __post_init__(self):
        """Validate goal and regular expressions."""
        if self.goal < 0:
            raise ValueError("goal must be >= 0")
        if not self.database:
            raise ValueError("database path cannot be empty")
        if self.accept_file_pattern and self.ignore_file_pattern:
            raise ValueError(
                "accept_file_pattern and ignore_file_pattern cannot be used together"
            )
        for name in ('annotation_pattern', 'accept_file_pattern', 'ignore_file_pattern'):
            try:
                re.compile(getattr(self, name))
            except re.error as e:
                raise ValueError(f"Bad {name.replace('_', ' ')}: {e}")

    @property
    def annotation_regex(self) -> Pattern:
        """Compiled annotation pattern."""
        return re.compile(self.annotation_pattern)

    @property
    def file_regex(self) -> Optional[Pattern]:
        """Compiled accept or ignore pattern, or None when neither is set."""
        pattern = self.accept_file_pattern or self.ignore_file_pattern
        return re.compile(pattern) if pattern else None

    @property
    def file_pattern_is_whitelist(self) -> bool:
        """True when file_regex selects files to accept rather than ignore."""
        return bool(self.accept_file_pattern)


_INT_KEYS = {'goal'}


def load_tracker_config(path: str) -> TrackerConfig:
    """Load and validate tracker configuration from YAML file.

    Unknown keys and wrongly typed values are rejected rather than ignored
    so a typo cannot silently fall back to a default.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated TrackerConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Tracker config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a mapping")

    return TrackerConfig(**_parse_config_values(raw_config))


def _parse_config_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Check keys and value types of raw configuration data.

    Args:
        data: Raw configuration mapping

    Returns:
        Keyword arguments for TrackerConfig

    Raises:
        ValueError: If a key is unknown or a value has the wrong type
    """
    allowed_keys = {f.name for f in fields(TrackerConfig)}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    values = {}
    for key, value in data.items():
        if key in _INT_KEYS:
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"'{key}' must be an integer")
        elif value is None:
            value = ""
        elif not isinstance(value, str):
            raise ValueError(f"'{key}' must be a string")
        values[key] = value
    return values
