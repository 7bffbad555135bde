"""
Configuration for alias scans.

A ``ScanConfig`` can be built in code, loaded from a YAML file
(``.aliasscan.yml`` searched upwards from a start directory), and
overridden from ``ALIASSCAN_*`` environment variables.
"""

import os
from dataclasses import dataclass, field, asdict, fields as dataclass_fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


CONFIG_FILE_NAMES = [".aliasscan.yml", ".aliasscan.yaml", "aliasscan.yml", "aliasscan.yaml"]

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ScanConfig:
    """Knobs for the graph walker and the tooling around it."""

    # Unwrap weakref.ref values and follow their referents
    follow_weakrefs: bool = True

    # Treat numpy arrays as shared-backing sequences keyed by data pointer
    scan_numpy: bool = True

    # Dotted type names (module.QualName) never descended into
    leaf_types: List[str] = field(default_factory=list)

    # Abort once more than this many identities are registered (0 = unlimited)
    max_objects: int = 0

    # Level used by the CLI when it configures logging
    log_level: str = "WARNING"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ``ValueError`` listing every invalid setting."""
        errors = []
        if not isinstance(self.max_objects, int) or isinstance(self.max_objects, bool):
            errors.append(f"max_objects must be an integer, got {self.max_objects!r}")
        elif self.max_objects < 0:
            errors.append(f"max_objects must be >= 0, got {self.max_objects}")
        if not isinstance(self.leaf_types, (list, tuple)) or not all(
            isinstance(name, str) for name in self.leaf_types
        ):
            errors.append(f"leaf_types must be a list of dotted type names, got {self.leaf_types!r}")
        if str(self.log_level).upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}")
        if errors:
            raise ValueError("; ".join(errors))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        """Create config from a (possibly partial) dict; unknown keys are ignored."""
        field_names = {f.name for f in dataclass_fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in field_names}
        if "leaf_types" in kwargs and kwargs["leaf_types"] is not None:
            kwargs["leaf_types"] = list(kwargs["leaf_types"])
        return cls(**kwargs)

    # --- Environment ---

    def apply_env_overrides(self, prefix: str = "ALIASSCAN_") -> "ScanConfig":
        """
        Return a copy with environment overrides applied.

        Example vars:
          ALIASSCAN_FOLLOW_WEAKREFS=false
          ALIASSCAN_MAX_OBJECTS=100000
          ALIASSCAN_LEAF_TYPES=pandas.DataFrame,decimal.Context
        """
        def get_bool(name: str, default: bool) -> bool:
            v = os.getenv(prefix + name)
            if v is None:
                return default
            return v.strip().lower() in ("1", "true", "yes", "on")

        def get_int(name: str, default: int) -> int:
            v = os.getenv(prefix + name)
            return int(v) if v is not None else default

        def get_list(name: str, default: List[str]) -> List[str]:
            v = os.getenv(prefix + name)
            if v is None:
                return default
            return [item.strip() for item in v.split(",") if item.strip()]

        def get_str(name: str, default: str) -> str:
            v = os.getenv(prefix + name)
            return v if v is not None else default

        return replace(
            self,
            follow_weakrefs=get_bool("FOLLOW_WEAKREFS", self.follow_weakrefs),
            scan_numpy=get_bool("SCAN_NUMPY", self.scan_numpy),
            leaf_types=get_list("LEAF_TYPES", list(self.leaf_types)),
            max_objects=get_int("MAX_OBJECTS", self.max_objects),
            log_level=get_str("LOG_LEVEL", self.log_level),
        )

    @classmethod
    def from_env(cls, prefix: str = "ALIASSCAN_") -> "ScanConfig":
        """Defaults plus environment overrides."""
        return cls().apply_env_overrides(prefix)

    # --- Files ---

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "ScanConfig":
        """Load configuration from YAML file."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Configuration file {file_path} must contain a mapping")
        return cls.from_dict(data or {})

    @classmethod
    def find_config_file(cls, start_path: Union[str, Path]) -> Optional[Path]:
        """Look for a config file in ``start_path`` and its parents."""
        current = Path(start_path).resolve()

        while True:
            for name in CONFIG_FILE_NAMES:
                config_path = current / name
                if config_path.exists():
                    return config_path
            if current == current.parent:
                return None
            current = current.parent

    @classmethod
    def find_and_load(cls, start_path: Union[str, Path]) -> "ScanConfig":
        """Find and load configuration from standard locations."""
        config_path = cls.find_config_file(start_path)
        if config_path is None:
            return cls()
        return cls.load_from_file(config_path)

    @classmethod
    def load_or_default(
        cls, config_path: Optional[Union[str, Path]] = None
    ) -> "ScanConfig":
        """
        Load configuration from file or search for one, then apply env overrides.

        Args:
            config_path: Optional explicit path to a configuration file

        Returns:
            ScanConfig instance
        """
        if config_path:
            config = cls.load_from_file(config_path)
        else:
            config = cls.find_and_load(Path.cwd())
        return config.apply_env_overrides()
