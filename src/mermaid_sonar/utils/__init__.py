"""Mermaid Sonar utility modules.

- logging: Human, verbose and JSON-lines log output
"""

from mermaid_sonar.utils.logging import LogMode, configure_from_cli, get_logger, setup_logging

__all__ = [
    "LogMode",
    "configure_from_cli",
    "get_logger",
    "setup_logging",
]
