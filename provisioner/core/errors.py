"""
Error taxonomy — every failure the provisioner can report.

All of these are fatal. They propagate untouched up to the CLI, which
prints the message and exits with status 1. Nothing in between catches
them to retry or roll back.
"""

from __future__ import annotations

from typing import Sequence


class ProvisionError(Exception):
    """Base class for all provisioning failures."""


class UnsupportedEnvironment(ProvisionError):
    """No supported package manager was found on the host."""


class ConfigError(ProvisionError):
    """Raised when CLI options or the settings file are invalid."""


class MissingArgument(ConfigError):
    """A required argument (or part of an argument set) was not supplied."""

    def __init__(self, message: str, missing: Sequence[str] = ()):
        super().__init__(message)
        self.missing = list(missing)


class MissingDependency(ProvisionError):
    """A required external tool is not available on the host."""

    def __init__(self, tool: str, hint: str = ""):
        message = f"{tool} not found"
        if hint:
            message = f"{message}, {hint}"
        super().__init__(message)
        self.tool = tool


class ExternalCommandFailure(ProvisionError):
    """An external command (package manager, downloader, vendor script) failed."""

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        stderr: str = "",
        reason: str = "",
    ):
        if reason:
            message = f"{reason}: {command}"
        else:
            message = f"Command failed (exit {returncode}): {command}"
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
