"""qunitlint MCP Server - Structural hygiene checks for QUnit test suites."""

import logging
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from qunitlint.config import QunitLintConfig
from qunitlint.core.analyzer import SuiteAnalyzer
from qunitlint.models import MESSAGE_TEMPLATES, RULE_FOR_MESSAGE

logger = logging.getLogger(__name__)

RULE_DESCRIPTIONS: dict[str, str] = {
    "no-commented-tests": "forbid commented-out tests",
    "no-identical-names": "forbid identical test and module names",
}

# Initialize the MCP server
mcp = FastMCP("qunitlint", instructions="Structural hygiene checks for QUnit test suites")

# Initialize components
config = QunitLintConfig.find_config()
analyzer = SuiteAnalyzer(config)


@mcp.tool()
def lint_test_source(code: str, path: str = "") -> dict[str, Any]:
    """
    Check QUnit test source for commented-out tests and duplicate names.

    Args:
        code: JavaScript source of the test file
        path: Optional file path used in the report

    Returns:
        Diagnostics in source order plus an outline of modules, tests and hooks
    """
    return analyzer.analyze(code, path=path or None).to_dict()


@mcp.tool()
def lint_test_file(path: str) -> dict[str, Any]:
    """
    Check a QUnit test file on disk.

    Args:
        path: Path to the JavaScript test file

    Returns:
        Lint result, or an error entry if the file cannot be read
    """
    try:
        return analyzer.analyze_file(Path(path)).to_dict()
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        return {"path": path, "error": str(e)}


@mcp.tool()
def list_rules() -> dict[str, Any]:
    """
    List the available rules, their messages and whether they are enabled.

    Returns:
        Rule metadata keyed by rule id
    """
    return {"rules": describe_rules(config)}


def describe_rules(lint_config: QunitLintConfig) -> dict[str, Any]:
    """Build rule metadata for a configuration."""
    rules: dict[str, Any] = {
        rule_id: {
            "description": description,
            "enabled": lint_config.rules.is_enabled(rule_id),
            "messages": {},
        }
        for rule_id, description in RULE_DESCRIPTIONS.items()
    }
    for message_id, rule_id in RULE_FOR_MESSAGE.items():
        rules[rule_id]["messages"][message_id.value] = MESSAGE_TEMPLATES[message_id]
    return rules


def main() -> None:
    """Run the qunitlint MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
