"""
Custom exception hierarchy for distsift.

This module defines structured exception types used across distsift.
All exceptions inherit from :class:`DistSiftError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Distribution classification never raises; the only failure surface of
the core is static metadata extraction (:class:`MetadataError` and its
subclasses), and every one of those is recoverable by falling back to
another metadata source.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class DistSiftError(Exception):
    """Base exception for all distsift errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Static metadata extraction
# ---------------------------------------------------------------------------


class MetadataError(DistSiftError):
    """Raised when static metadata cannot be extracted from a manifest.

    Callers are expected to catch this and fall back to an alternate
    metadata source (for example, building the project).
    """


class ConfigParseError(MetadataError):
    """Raised when a manifest is not valid TOML or has malformed fields.

    Args:
        message: Error description.
        field: Dotted name of the offending field, if known.
        content: Offending value or source snippet, truncated for safety.
    """

    __slots__ = ("field", "content")

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        content: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "field", field)
        if content is not None:
            details["content"] = _truncate(content)

        super().__init__(message, details)

        self.field = field
        self.content = content


class MissingFieldError(MetadataError):
    """Raised when a required manifest table or key is absent.

    Args:
        field: Dotted name of the missing field (e.g. ``"project"``).
    """

    __slots__ = ("field",)

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}", {"field": field})
        self.field = field


class DynamicFieldError(MetadataError):
    """Raised when a needed field is declared in ``project.dynamic``.

    Args:
        field: The dynamic field name (``"dependencies"`` or
            ``"optional-dependencies"``).
    """

    __slots__ = ("field",)

    def __init__(self, field: str) -> None:
        super().__init__(
            f"Field '{field}' is declared as dynamic and cannot be read statically",
            {"field": field},
        )
        self.field = field


class LegacyToolSyntaxError(MetadataError):
    """Raised when dependencies live only in a legacy ``[tool.*]`` table.

    A ``[project]`` table without ``dependencies`` next to, e.g.,
    ``[tool.poetry]`` almost always means the dependencies were never
    converted; reading it as "no dependencies" would be wrong.

    Args:
        tool: Name of the legacy tool table.
    """

    __slots__ = ("tool",)

    def __init__(self, tool: str) -> None:
        super().__init__(
            f"Dependencies are declared with [tool.{tool}] but "
            "project.dependencies is missing",
            {"tool": tool},
        )
        self.tool = tool


# ---------------------------------------------------------------------------
# Configuration and I/O (outer surface)
# ---------------------------------------------------------------------------


class ConfigError(DistSiftError):
    """Raised when the distsift configuration file is invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file.
        option: Offending option name.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class FileOperationError(DistSiftError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/list).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
