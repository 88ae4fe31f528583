"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a setting is present but unusable.

    ``setting`` names the environment variable or file the value came from, when
    there is a single one to point at.
    """

    def __init__(self, message: str, *, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class MissingConfigurationError(ConfigurationError):
    """Raised when required settings are absent or blank."""

    def __init__(self, names: tuple[str, ...]) -> None:
        super().__init__(
            f"Missing configuration for: {', '.join(names)}",
            setting=names[0] if len(names) == 1 else None,
        )
        self.names = names
