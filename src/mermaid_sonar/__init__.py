"""Mermaid Sonar - static readability analysis for Mermaid diagrams.

Mermaid Sonar estimates how large and how complex a Mermaid diagram will be
once rendered, without rendering it, and reports diagrams that will be too
wide, too tall, too dense or too decision-heavy to read comfortably.

Core principles:
- Static: no rendering engine, no browser, no network
- Deterministic: the same source always yields the same metrics and issues
- Best-effort parsing: unknown lines are skipped, never rejected
- Pluggable rules: new checks register without touching existing ones
- CI/CD Compatibility: no interactive prompts, meaningful exit codes
"""

__version__ = "0.1.0"
__author__ = "Mermaid Sonar Contributors"
