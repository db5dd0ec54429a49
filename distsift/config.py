"""Configuration file loader for distsift.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``distsift.toml`` — settings under ``[distsift]`` table
- ``pyproject.toml`` — settings under ``[tool.distsift]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DISTSIFT_CONFIG``
2. ``distsift.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.distsift]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``distsift.toml``)::

    [distsift]
    no_binary = ["pyyaml"]
    no_build = [":all:"]
    require_hashes = false
    match_platform_tags = true

    [distsift.hashes]
    "idna==3.6" = ["sha256:c05567e9c24a6b9faaa835c4821bad0590fbb9d5779e7caa6e1cc4978e7eb24f"]
"""

from __future__ import annotations

import dataclasses
import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from distsift.exceptions import ConfigError
from distsift.utils.logger import get_logger
from distsift.core.policy import BuildOptions, HashStrategy
from distsift.constants import (
    ALL_PACKAGES,
    DEFAULT_MATCH_PLATFORM_TAGS,
    DEFAULT_REQUIRE_HASHES,
)

logger = get_logger("config")


@dataclass
class DistSiftConfig:
    """Parsed and validated distsift configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        no_binary: Packages whose wheels must not be used (``":all:"`` for
            every package).
        no_build: Packages whose source distributions must not be built.
        require_hashes: Validate hashes for every package.
        hashes: Required digests keyed by ``"name==version"``.
        match_platform_tags: Rank wheels against the running interpreter's
            tags. When ``False``, every wheel tag is accepted unranked.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    no_binary: List[str] = field(default_factory=list)
    no_build: List[str] = field(default_factory=list)
    require_hashes: bool = DEFAULT_REQUIRE_HASHES
    hashes: Dict[str, List[str]] = field(default_factory=dict)
    match_platform_tags: bool = DEFAULT_MATCH_PLATFORM_TAGS

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def with_cli_options(
        self,
        *,
        no_binary: Iterable[str] = (),
        no_build: Iterable[str] = (),
        require_hashes: bool = False,
    ) -> DistSiftConfig:
        """Return a copy with command-line options layered on top.

        Package lists are appended after the file's entries, so a CLI
        ``:none:`` clears what the file selected.
        """
        return dataclasses.replace(
            self,
            no_binary=[*self.no_binary, *no_binary],
            no_build=[*self.no_build, *no_build],
            require_hashes=self.require_hashes or require_hashes,
        )

    def build_options(self) -> BuildOptions:
        return BuildOptions.from_lists(no_binary=self.no_binary, no_build=self.no_build)

    def hash_strategy(self) -> HashStrategy:
        """Return the configured hash strategy.

        Raises:
            ConfigError: A ``hashes`` key or digest is malformed.
        """
        try:
            return HashStrategy.from_mapping(self.hashes, require=self.require_hashes)
        except ValueError as exc:
            raise ConfigError(
                str(exc),
                config_path=str(self.source_path) if self.source_path else None,
                option="hashes",
            ) from exc

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "no_binary": self.no_binary,
            "no_build": self.no_build,
            "require_hashes": self.require_hashes,
            "hashes": len(self.hashes),
            "match_platform_tags": self.match_platform_tags,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    distsift_toml = cwd / "distsift.toml"
    if distsift_toml.is_file():
        logger.debug("Found distsift.toml: %s", distsift_toml)
        return distsift_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_distsift_section(pyproject_toml):
        logger.debug("Found [tool.distsift] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_distsift_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.distsift] section.

    An unreadable or invalid pyproject.toml counts as "no section"; it may
    belong to a project that distsift is only inspecting.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "distsift" in tool


def load_config(config_path: Optional[Path] = None) -> DistSiftConfig:
    """Load and validate distsift configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`DistSiftConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return DistSiftConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("distsift", {})
    else:
        section = raw.get("distsift", {})

    if not section:
        logger.debug("Config file found but no distsift section, using defaults")
        return DistSiftConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> DistSiftConfig:
    """Parse and validate a ``[distsift]`` or ``[tool.distsift]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = DistSiftConfig()

    known_top = {
        "no_binary",
        "no_build",
        "require_hashes",
        "hashes",
        "match_platform_tags",
    }

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    for option in ("no_binary", "no_build"):
        if option in section:
            setattr(
                config,
                option,
                _package_list(section[option], option=option, config_path=config_path),
            )

    for option in ("require_hashes", "match_platform_tags"):
        if option in section:
            val = section[option]
            if not isinstance(val, bool):
                raise ConfigError(
                    f"{option} must be a boolean, got {type(val).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    if "hashes" in section:
        val = section["hashes"]
        if not isinstance(val, dict) or not all(
            isinstance(digests, list) and all(isinstance(d, str) for d in digests)
            for digests in val.values()
        ):
            raise ConfigError(
                "hashes must be a table of arrays of strings",
                config_path=config_path,
                option="hashes",
            )
        config.hashes = {key: list(digests) for key, digests in val.items()}

    return config


def _package_list(value: Any, *, option: str, config_path: str) -> List[str]:
    """Accept ``":all:"`` or an array of package names."""
    if value == ALL_PACKAGES:
        return [ALL_PACKAGES]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(
        f'{option} must be an array of package names or "{ALL_PACKAGES}"',
        config_path=config_path,
        option=option,
    )
