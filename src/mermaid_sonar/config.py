"""Mermaid Sonar configuration system.

Configuration is YAML-based with a few CLI overrides (--viewport-profile,
--max-width, --max-height, --format). Supports environment variable
substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.mermaid-sonar/config.yaml
3. ./mermaid-sonar.yaml
4. ./.sonarrc.yaml

Viewport resolution (highest priority first):
1. CLI overrides (--viewport-profile, then --max-width / --max-height)
2. Direct values under ``viewport:`` (max_width, max_height, thresholds)
3. Named profile under ``viewport.profile``
4. Legacy rule-level values (``target_width`` / ``target_height`` and
   ``thresholds`` on the width/height rules)
5. Built-in ``default`` profile
"""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from mermaid_sonar.analyzers.dimensions import EstimationConstants
from mermaid_sonar.models.issue import Severity

WIDTH_RULE = "horizontal-width-readability"
HEIGHT_RULE = "vertical-height-readability"

OUTPUT_FORMATS = ("text", "json", "junit", "github", "markdown")


class ConfigError(ValueError):
    """Invalid configuration (bad values, unknown profile, unreadable file)."""


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class RuleConfig:
    """Per-rule configuration.

    Unset values fall back to the rule's own defaults.

    Attributes:
        enabled: Whether the rule runs
        severity: Severity override
        threshold: Threshold override
        options: Rule-specific settings (e.g. density_threshold)
    """

    enabled: bool = True
    severity: Severity | None = None
    threshold: float | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate rule configuration."""
        if self.threshold is not None and self.threshold < 0:
            raise ConfigError(f"Rule threshold must be >= 0 (got {self.threshold})")


@dataclass(frozen=True)
class Tiers:
    """Three-tier pixel ladder: info < warning < error."""

    info: int
    warning: int
    error: int

    def __post_init__(self) -> None:
        """Validate tier ordering."""
        if min(self.info, self.warning, self.error) <= 0:
            raise ConfigError(f"Thresholds must be positive (got {self.as_tuple()})")
        if not self.info < self.warning < self.error:
            raise ConfigError(
                f"Thresholds must be ascending info < warning < error (got {self.as_tuple()})"
            )

    @classmethod
    def around(cls, target: int) -> "Tiers":
        """Derive a ladder whose warning tier is ``target``."""
        return cls(info=round(target * 0.75), warning=target, error=round(target * 1.25))

    def severity_for(self, value: float) -> Severity:
        """Map a measurement onto the ladder (info floor)."""
        if value > self.error:
            return Severity.ERROR
        if value > self.warning:
            return Severity.WARNING
        return Severity.INFO

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.info, self.warning, self.error)

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for serialization."""
        return {"info": self.info, "warning": self.warning, "error": self.error}


@dataclass(frozen=True)
class ViewportProfile:
    """Resolved viewport constraints.

    Attributes:
        name: Profile name ("custom" once overridden)
        description: What rendering context the profile models
        max_width: Width above which the width rule fires
        max_height: Height above which the height rule fires
        width_thresholds: Severity ladder for width
        height_thresholds: Severity ladder for height
    """

    name: str
    max_width: int
    max_height: int
    width_thresholds: Tiers
    height_thresholds: Tiers
    description: str = ""

    def __post_init__(self) -> None:
        """Validate viewport limits."""
        if self.max_width <= 0 or self.max_height <= 0:
            raise ConfigError(
                f"Viewport limits must be positive (got {self.max_width}x{self.max_height})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "max_width": self.max_width,
            "max_height": self.max_height,
            "width_thresholds": self.width_thresholds.to_dict(),
            "height_thresholds": self.height_thresholds.to_dict(),
        }


# Each target sits on its warning tier, not its error tier: the readability
# rules report a diagram as soon as it passes the target, and the tiers above
# only decide how loudly.
BUILTIN_PROFILES: dict[str, ViewportProfile] = {
    "default": ViewportProfile(
        name="default",
        description="Standard browser viewport",
        max_width=2000,
        max_height=1200,
        width_thresholds=Tiers(1500, 2000, 2500),
        height_thresholds=Tiers(800, 1200, 2000),
    ),
    "mkdocs": ViewportProfile(
        name="mkdocs",
        description="MkDocs documentation with sidebar (~800px content width)",
        max_width=700,
        max_height=1200,
        width_thresholds=Tiers(600, 700, 800),
        height_thresholds=Tiers(1000, 1200, 1500),
    ),
    "docusaurus": ViewportProfile(
        name="docusaurus",
        description="Docusaurus documentation (~900px content width)",
        max_width=800,
        max_height=1200,
        width_thresholds=Tiers(700, 800, 900),
        height_thresholds=Tiers(1000, 1200, 1500),
    ),
    "github": ViewportProfile(
        name="github",
        description="GitHub README and markdown files (~1000px content width)",
        max_width=900,
        max_height=1500,
        width_thresholds=Tiers(800, 900, 1000),
        height_thresholds=Tiers(1200, 1500, 1800),
    ),
    "mobile": ViewportProfile(
        name="mobile",
        description="Mobile devices (~400px width)",
        max_width=350,
        max_height=700,
        width_thresholds=Tiers(300, 350, 400),
        height_thresholds=Tiers(600, 700, 800),
    ),
}


@dataclass
class ViewportConfig:
    """Viewport section of the config file.

    Attributes:
        profile: Named profile to use
        max_width: Direct width limit
        max_height: Direct height limit
        width_thresholds: Direct width ladder
        height_thresholds: Direct height ladder
        profiles: Custom profiles, by name
    """

    profile: str | None = None
    max_width: int | None = None
    max_height: int | None = None
    width_thresholds: Tiers | None = None
    height_thresholds: Tiers | None = None
    profiles: dict[str, ViewportProfile] = field(default_factory=dict)


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        format: Report format (text, json, junit, github, markdown)
        path: Report file path (stdout if None)
    """

    format: str = "text"
    path: str | None = None

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.format not in OUTPUT_FORMATS:
            raise ConfigError(f"Invalid output format: {self.format}. Valid: {list(OUTPUT_FORMATS)}")


@dataclass
class CIConfig:
    """CI/CD-specific configuration.

    Attributes:
        fail_on_warning: Exit with error if warnings occur
    """

    fail_on_warning: bool = False


@dataclass
class SonarConfig:
    """Top-level Mermaid Sonar configuration.

    Attributes:
        rules: Per-rule settings, by rule name
        viewport: Viewport settings
        estimation: Dimension estimation constants
        output: Report format and destination
        ci: CI/CD settings
    """

    rules: dict[str, RuleConfig] = field(default_factory=dict)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    estimation: EstimationConstants = field(default_factory=EstimationConstants)
    output: OutputConfig = field(default_factory=OutputConfig)
    ci: CIConfig = field(default_factory=CIConfig)

    # Runtime (set by loader)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    def available_profiles(self) -> dict[str, ViewportProfile]:
        """Get built-in profiles merged with custom ones (custom wins)."""
        return {**BUILTIN_PROFILES, **self.viewport.profiles}


@dataclass(frozen=True)
class ViewportOverrides:
    """Per-run viewport overrides from the command line."""

    profile: str | None = None
    max_width: int | None = None
    max_height: int | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully resolved configuration handed to the analysis core.

    The core never merges or validates; everything here is final.
    """

    rules: Mapping[str, RuleConfig] = field(default_factory=dict)
    viewport: ViewportProfile = BUILTIN_PROFILES["default"]
    estimation: EstimationConstants = field(default_factory=EstimationConstants)

    def rule(self, name: str) -> RuleConfig:
        """Get a rule's configuration (defaults when not configured)."""
        return self.rules.get(name) or RuleConfig()


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. Example: ${SONAR_PROFILE} -> value of SONAR_PROFILE

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ConfigError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.mermaid-sonar/config.yaml
    2. ./mermaid-sonar.yaml
    3. ./.sonarrc.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".mermaid-sonar" / "config.yaml",
        start_path / "mermaid-sonar.yaml",
        start_path / ".sonarrc.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _parse_tiers(value: Any, where: str) -> Tiers:
    """Parse a ladder given as {info, warning, error} or a 3-item list."""
    try:
        if isinstance(value, Mapping):
            return Tiers(int(value["info"]), int(value["warning"]), int(value["error"]))
        if isinstance(value, list | tuple) and len(value) == 3:
            return Tiers(int(value[0]), int(value[1]), int(value[2]))
    except (KeyError, TypeError, ValueError) as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"{where}: expected info/warning/error thresholds ({e})") from e
    raise ConfigError(f"{where}: expected info/warning/error thresholds, got {value!r}")


def _parse_positive_int(value: Any, where: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{where}: expected a number, got {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{where}: must be positive (got {number})")
    return number


def _parse_rule(name: str, data: Any) -> RuleConfig:
    if isinstance(data, bool):
        return RuleConfig(enabled=data)
    if not isinstance(data, Mapping):
        raise ConfigError(f"rules.{name}: expected a mapping, got {data!r}")

    options = {k: v for k, v in data.items() if k not in {"enabled", "severity", "threshold"}}
    try:
        severity = Severity.parse(data["severity"]) if "severity" in data else None
    except ValueError as e:
        raise ConfigError(f"rules.{name}: {e}") from e

    threshold = data.get("threshold")
    if threshold is not None and not isinstance(threshold, int | float):
        raise ConfigError(f"rules.{name}.threshold: expected a number, got {threshold!r}")

    return RuleConfig(
        enabled=bool(data.get("enabled", True)),
        severity=severity,
        threshold=threshold,
        options=options,
    )


def _parse_profile(name: str, data: Any) -> ViewportProfile:
    if not isinstance(data, Mapping):
        raise ConfigError(f"viewport.profiles.{name}: expected a mapping")
    where = f"viewport.profiles.{name}"
    max_width = _parse_positive_int(data.get("max_width"), f"{where}.max_width")
    max_height = _parse_positive_int(data.get("max_height"), f"{where}.max_height")
    width = data.get("width_thresholds")
    height = data.get("height_thresholds")
    return ViewportProfile(
        name=name,
        description=str(data.get("description", "")),
        max_width=max_width,
        max_height=max_height,
        width_thresholds=_parse_tiers(width, f"{where}.width_thresholds")
        if width is not None
        else Tiers.around(max_width),
        height_thresholds=_parse_tiers(height, f"{where}.height_thresholds")
        if height is not None
        else Tiers.around(max_height),
    )


def load_config_from_dict(data: dict[str, Any]) -> SonarConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        SonarConfig instance

    Raises:
        ConfigError: If any value is invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration root must be a mapping")

    data = substitute_env_vars(data)
    config = SonarConfig()

    # Rules
    for name, rule_data in (data.get("rules") or {}).items():
        config.rules[name] = _parse_rule(name, rule_data)

    # Viewport
    if "viewport" in data:
        viewport_data = data["viewport"] or {}
        viewport = ViewportConfig(profile=viewport_data.get("profile"))
        if viewport_data.get("max_width") is not None:
            viewport.max_width = _parse_positive_int(viewport_data["max_width"], "viewport.max_width")
        if viewport_data.get("max_height") is not None:
            viewport.max_height = _parse_positive_int(
                viewport_data["max_height"], "viewport.max_height"
            )
        if viewport_data.get("width_thresholds") is not None:
            viewport.width_thresholds = _parse_tiers(
                viewport_data["width_thresholds"], "viewport.width_thresholds"
            )
        if viewport_data.get("height_thresholds") is not None:
            viewport.height_thresholds = _parse_tiers(
                viewport_data["height_thresholds"], "viewport.height_thresholds"
            )
        for name, profile_data in (viewport_data.get("profiles") or {}).items():
            viewport.profiles[name] = _parse_profile(name, profile_data)
        config.viewport = viewport

    # Estimation constants
    if "estimation" in data:
        estimation_data = data["estimation"] or {}
        try:
            config.estimation = EstimationConstants(**estimation_data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"estimation: {e}") from e

    # Output config
    if "output" in data:
        output_data = data["output"] or {}
        config.output = OutputConfig(
            format=output_data.get("format", config.output.format),
            path=output_data.get("path", config.output.path),
        )

    # CI config
    if "ci" in data:
        ci_data = data["ci"] or {}
        config.ci = CIConfig(
            fail_on_warning=bool(ci_data.get("fail_on_warning", False)),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> SonarConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        SonarConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ConfigError: If the file is not valid YAML or holds invalid values
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is None:
        return SonarConfig()

    try:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {found_path}: {e}") from e

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


# =============================================================================
# Resolution
# =============================================================================


def _legacy_profile(config: SonarConfig, base: ViewportProfile) -> ViewportProfile:
    """Apply rule-level target_width/target_height values."""
    profile = base
    width_rule = config.rules.get(WIDTH_RULE)
    height_rule = config.rules.get(HEIGHT_RULE)

    if width_rule is not None:
        options = width_rule.options
        if "target_width" in options:
            target = _parse_positive_int(options["target_width"], f"rules.{WIDTH_RULE}.target_width")
            profile = replace(profile, name="custom", max_width=target, width_thresholds=Tiers.around(target))
        if "thresholds" in options:
            profile = replace(
                profile,
                name="custom",
                width_thresholds=_parse_tiers(options["thresholds"], f"rules.{WIDTH_RULE}.thresholds"),
            )

    if height_rule is not None:
        options = height_rule.options
        if "target_height" in options:
            target = _parse_positive_int(options["target_height"], f"rules.{HEIGHT_RULE}.target_height")
            profile = replace(profile, name="custom", max_height=target, height_thresholds=Tiers.around(target))
        if "thresholds" in options:
            profile = replace(
                profile,
                name="custom",
                height_thresholds=_parse_tiers(options["thresholds"], f"rules.{HEIGHT_RULE}.thresholds"),
            )

    return profile


def _named_profile(config: SonarConfig, name: str) -> ViewportProfile:
    profiles = config.available_profiles()
    if name not in profiles:
        raise ConfigError(f"Unknown viewport profile: {name}. Available: {sorted(profiles)}")
    return profiles[name]


def _apply_limits(
    profile: ViewportProfile,
    max_width: int | None,
    max_height: int | None,
    width_thresholds: Tiers | None = None,
    height_thresholds: Tiers | None = None,
) -> ViewportProfile:
    if max_width is not None:
        profile = replace(
            profile,
            name="custom",
            max_width=max_width,
            width_thresholds=width_thresholds or Tiers.around(max_width),
        )
    elif width_thresholds is not None:
        profile = replace(profile, name="custom", width_thresholds=width_thresholds)

    if max_height is not None:
        profile = replace(
            profile,
            name="custom",
            max_height=max_height,
            height_thresholds=height_thresholds or Tiers.around(max_height),
        )
    elif height_thresholds is not None:
        profile = replace(profile, name="custom", height_thresholds=height_thresholds)

    return profile


def resolve_viewport(
    config: SonarConfig,
    overrides: ViewportOverrides | None = None,
) -> ViewportProfile:
    """Resolve the single active viewport profile.

    Args:
        config: Loaded configuration
        overrides: CLI overrides

    Returns:
        Resolved ViewportProfile

    Raises:
        ConfigError: If a named profile is unknown or a value is invalid
    """
    overrides = overrides or ViewportOverrides()

    profile = _legacy_profile(config, BUILTIN_PROFILES["default"])

    if config.viewport.profile:
        profile = _named_profile(config, config.viewport.profile)

    profile = _apply_limits(
        profile,
        config.viewport.max_width,
        config.viewport.max_height,
        config.viewport.width_thresholds,
        config.viewport.height_thresholds,
    )

    if overrides.profile:
        profile = _named_profile(config, overrides.profile)

    for value, label in ((overrides.max_width, "--max-width"), (overrides.max_height, "--max-height")):
        if value is not None and value <= 0:
            raise ConfigError(f"{label} must be positive (got {value})")
    return _apply_limits(profile, overrides.max_width, overrides.max_height)


def resolve_config(
    config: SonarConfig,
    overrides: ViewportOverrides | None = None,
) -> ResolvedConfig:
    """Resolve a loaded configuration into the form the analysis core consumes.

    Args:
        config: Loaded configuration
        overrides: CLI viewport overrides

    Returns:
        ResolvedConfig

    Raises:
        ConfigError: If the configuration cannot be resolved
    """
    return ResolvedConfig(
        rules=dict(config.rules),
        viewport=resolve_viewport(config, overrides),
        estimation=config.estimation,
    )


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return """# Mermaid Sonar Configuration

# Rule settings: enabled, severity (info|warning|error), threshold
rules:
  max-edges:
    enabled: true
    severity: error
    threshold: 100
  max-nodes-high-density:
    enabled: true
    severity: warning
    threshold: 50
    density_threshold: 0.3
  max-nodes-low-density:
    enabled: true
    severity: warning
    threshold: 100
  cyclomatic-complexity:
    enabled: true
    severity: warning
    threshold: 10
  reserved-words:
    enabled: true
  horizontal-width-readability:
    enabled: true
  vertical-height-readability:
    enabled: true

# Viewport constraints for width/height readability
viewport:
  profile: default   # default, mkdocs, docusaurus, github, mobile
  # max_width: 1000
  # max_height: 1500
  # width_thresholds: {info: 800, warning: 1000, error: 1200}
  # profiles:
  #   wiki:
  #     max_width: 1100
  #     max_height: 1600

# Dimension estimation constants (pixels)
# estimation:
#   char_width: 8.0
#   node_spacing: 45
#   rank_spacing: 50

# Output settings
output:
  format: text   # text, json, junit, github, markdown

# CI/CD settings
ci:
  fail_on_warning: false
"""
