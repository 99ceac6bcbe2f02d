"""Entry point for running Mermaid Sonar as a module.

Usage:
    python -m mermaid_sonar [command] [options]

Example:
    python -m mermaid_sonar analyze docs/
    python -m mermaid_sonar analyze README.md --viewport-profile github
"""

from mermaid_sonar.cli import app

if __name__ == "__main__":
    app()
