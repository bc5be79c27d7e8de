"""Configuration system for qunitlint."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class RulesConfig(BaseModel):
    """Which rules are enabled."""

    no_commented_tests: bool = True
    no_identical_names: bool = True

    def is_enabled(self, rule_id: str) -> bool:
        """Check whether a rule is enabled by its dashed id."""
        return bool(getattr(self, rule_id.replace("-", "_"), False))


class IdentifiersConfig(BaseModel):
    """Names that identify declarations in test files."""

    qualifier: str = Field(default="QUnit", min_length=1)
    module_callees: list[str] = Field(default_factory=lambda: ["module"], min_length=1)
    test_callees: list[str] = Field(
        default_factory=lambda: ["test", "asyncTest", "only"], min_length=1
    )
    hook_names: list[str] = Field(
        default_factory=lambda: ["before", "beforeEach", "afterEach", "after", "setup", "teardown"]
    )


class CommentsConfig(BaseModel):
    """Comment scanning behavior."""

    todo_marker: str = Field(default="TODO", min_length=1)


class QunitLintConfig(BaseModel):
    """Main qunitlint configuration."""

    version: str = "1.0"
    rules: RulesConfig = Field(default_factory=RulesConfig)
    identifiers: IdentifiersConfig = Field(default_factory=IdentifiersConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)

    @classmethod
    def load(cls, config_path: Path) -> "QunitLintConfig":
        """Load configuration from a YAML file."""
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        logger.debug("Loaded configuration from %s", config_path)
        return cls(**data)

    @classmethod
    def find_config(cls, start_path: Path | None = None) -> "QunitLintConfig":
        """Find and load configuration, searching up the directory tree."""
        if start_path is None:
            start_path = Path.cwd()

        current = start_path
        while current != current.parent:
            config_file = current / ".qunitlint" / "config.yaml"
            if config_file.exists():
                return cls.load(config_file)

            config_file = current / ".qunitlint.yaml"
            if config_file.exists():
                return cls.load(config_file)

            current = current.parent

        return cls()

    def save(self, config_path: Path) -> None:
        """Save configuration to a YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)


def get_default_config() -> QunitLintConfig:
    """Get the default configuration."""
    return QunitLintConfig()
