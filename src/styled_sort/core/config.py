"""
Unified configuration system for Styled Sort
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .classification import DEFAULT_MARKER_NAMES

logger = logging.getLogger(__name__)

VALID_SEPARATORS = ["\n", "\n\n"]
VALID_USAGE_STRATEGIES = ["structural", "text"]


@dataclass
class RuleConfig:
    """Configuration for the ordering rule"""

    # Tags/callees that make a declaration a tracked styled declaration
    marker_names: list[str] = field(
        default_factory=lambda: list(DEFAULT_MARKER_NAMES)
    )
    separator: str = "\n"  # placed between spliced declarations
    usage_strategy: str = "structural"  # structural or text
    max_passes: int = 1000


@dataclass
class FixConfig:
    """Configuration for applying fixes"""

    max_fix_passes: int = 10


@dataclass
class ParserConfig:
    """Configuration for obtaining ESTree syntax trees"""

    # External command printing the ESTree JSON of the file appended to it
    command: list[str] = field(default_factory=list)
    ast_suffix: str = ".estree.json"  # sidecar AST dump next to the source


@dataclass
class BackupConfig:
    """Configuration for backup operations"""

    enabled: bool = True
    directory: str = ".backups"
    compression: bool = True
    keep_sessions: int = 10


@dataclass
class Config:
    """Main configuration class for Styled Sort"""

    # General settings
    dry_run: bool = False
    verbose: bool = False
    quiet: bool = False

    # Source file filtering
    extensions: list[str] = field(
        default_factory=lambda: [".js", ".jsx", ".ts", ".tsx"]
    )

    # Sub-configurations
    rule: RuleConfig = field(default_factory=RuleConfig)
    fix: FixConfig = field(default_factory=FixConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)

    # File paths
    config_file: str | None = None

    @classmethod
    def from_file(cls, filepath: Path) -> "Config":
        """Load configuration from YAML or JSON file"""
        if not filepath.exists():
            logger.warning(f"Config file not found: {filepath}")
            return cls()

        try:
            with open(filepath, "r") as f:
                if filepath.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f) or {}
                elif filepath.suffix == ".json":
                    data = json.load(f)
                else:
                    logger.error(f"Unsupported config file format: {filepath.suffix}")
                    return cls()

            config = cls._from_dict(data)
            config.config_file = str(filepath)
            return config
        except Exception as e:
            logger.error(f"Error loading config file: {e}")
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config instance from dictionary"""
        config = cls()

        # Load general settings
        for key in ["dry_run", "verbose", "quiet"]:
            if key in data:
                setattr(config, key, data[key])

        if "extensions" in data:
            config.extensions = data["extensions"]

        # Load sub-configurations
        if "rule" in data:
            config.rule = RuleConfig(**data["rule"])
        if "fix" in data:
            config.fix = FixConfig(**data["fix"])
        if "parser" in data:
            config.parser = ParserConfig(**data["parser"])
        if "backup" in data:
            config.backup = BackupConfig(**data["backup"])

        return config

    @classmethod
    def load_hierarchy(cls, project_dir: Path | None = None) -> "Config":
        """Load configuration from hierarchy: global -> project -> env vars"""
        config = cls()

        # 1. Load global config
        global_config = Path.home() / ".styled-sort" / "config.yaml"
        if global_config.exists():
            config = cls.from_file(global_config)
            logger.debug(f"Loaded global config from {global_config}")

        # 2. Load project config
        if project_dir:
            project_config = project_dir / ".styled-sort.yaml"
            if project_config.exists():
                project_data = cls.from_file(project_config)
                config.merge(project_data)
                logger.debug(f"Loaded project config from {project_config}")

        # 3. Apply environment variables
        config.apply_env_vars()

        return config

    def merge(self, other: "Config") -> None:
        """Merge another config into this one (other takes precedence)"""
        if other.config_file:
            self.config_file = other.config_file
        if other.extensions != Config().extensions:
            self.extensions = other.extensions

        # Merge boolean flags (only if explicitly set to True)
        for flag in ["dry_run", "verbose", "quiet"]:
            if getattr(other, flag):
                setattr(self, flag, True)

        # Merge sub-configurations
        self._merge_dataclass(self.rule, other.rule)
        self._merge_dataclass(self.fix, other.fix)
        self._merge_dataclass(self.parser, other.parser)
        self._merge_dataclass(self.backup, other.backup)

    def _merge_dataclass(self, target: Any, source: Any) -> None:
        """Merge source dataclass into target"""
        for field_name in source.__dataclass_fields__:
            source_value = getattr(source, field_name)
            if source_value != getattr(target.__class__(), field_name):
                setattr(target, field_name, source_value)

    def apply_env_vars(self) -> None:
        """Apply environment variables to configuration"""
        # STYLED_SORT_DRY_RUN
        if os.environ.get("STYLED_SORT_DRY_RUN", "").lower() in ["true", "1", "yes"]:
            self.dry_run = True

        # STYLED_SORT_VERBOSE
        if os.environ.get("STYLED_SORT_VERBOSE", "").lower() in ["true", "1", "yes"]:
            self.verbose = True

        # STYLED_SORT_MARKERS
        if markers := os.environ.get("STYLED_SORT_MARKERS"):
            self.rule.marker_names = [
                name.strip() for name in markers.split(",") if name.strip()
            ]

        # STYLED_SORT_SEPARATOR ("1" or "2" newlines)
        if separator := os.environ.get("STYLED_SORT_SEPARATOR"):
            if separator.isdigit():
                self.rule.separator = "\n" * int(separator)
            else:
                logger.warning(f"Ignoring STYLED_SORT_SEPARATOR={separator!r}")

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.rule.marker_names:
            errors.append("At least one marker name is required")

        if self.rule.separator not in VALID_SEPARATORS:
            errors.append(
                f"Invalid separator: {self.rule.separator!r} (use one or two newlines)"
            )

        if self.rule.usage_strategy not in VALID_USAGE_STRATEGIES:
            errors.append(f"Invalid usage strategy: {self.rule.usage_strategy}")

        if self.rule.max_passes < 1:
            errors.append("max_passes must be positive")
        if self.fix.max_fix_passes < 1:
            errors.append("max_fix_passes must be positive")

        for ext in self.extensions:
            if not ext.startswith("."):
                errors.append(f"Invalid extension: {ext}")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "dry_run": self.dry_run,
            "verbose": self.verbose,
            "quiet": self.quiet,
            "extensions": self.extensions,
            "rule": asdict(self.rule),
            "fix": asdict(self.fix),
            "parser": asdict(self.parser),
            "backup": asdict(self.backup),
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to file"""
        data = self.to_dict()

        with open(filepath, "w") as f:
            if filepath.suffix in [".yaml", ".yml"]:
                yaml.safe_dump(data, f, default_flow_style=False)
            elif filepath.suffix == ".json":
                json.dump(data, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {filepath.suffix}")
