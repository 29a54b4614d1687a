"""
Shell command adapter — the SINGLE PLACE where ``subprocess.run`` is called.

All escalation, logging, timeouts, secret redaction and error handling
for external commands is centralised here. Every task talks to the host
through a ``CommandRunner``.

Escalation:
    - Running as root → commands run as-is.
    - Otherwise, ``privileged=True`` calls are prefixed with ``sudo``.
      Environment overrides are passed through ``env`` because sudo
      resets the caller's environment.
    - Escalation is applied per call. There is no sudo session.

Dry-run:
    Mutating commands are logged and reported as successful without
    being executed. Read-only probes (``query``) always run so that
    planning reflects the real host.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from provisioner.core.errors import ExternalCommandFailure, MissingDependency

logger = logging.getLogger(__name__)

_REDACTED = "***"
_OUTPUT_TAIL = 2000


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_argv(argv: Sequence[str], secrets: Iterable[str] = ()) -> str:
    """Render a command for logs and error messages, with secrets masked."""
    return _redact(" ".join(shlex.quote(a) for a in argv), secrets)


def _is_root() -> bool:
    return os.geteuid() == 0


@dataclass
class CommandRunner:
    """Run external commands with consistent escalation and logging.

    Args:
        dry_run: Log mutating commands instead of executing them.
        timeout: Default timeout in seconds for every command.
        privileged: Whether the process already runs as root.
            Resolved from the effective uid when not given.
        escalation: Command prefix used for privileged calls when
            not running as root.
    """

    dry_run: bool = False
    timeout: int = 900
    privileged: bool = field(default_factory=_is_root)
    escalation: tuple[str, ...] = ("sudo",)

    def needs_escalation(self) -> bool:
        return not self.privileged

    def which(self, name: str) -> str | None:
        """Locate an executable on the search path."""
        return shutil.which(name)

    def run(
        self,
        argv: Sequence[str],
        *,
        privileged: bool = False,
        env_overrides: Mapping[str, str] | None = None,
        timeout: int | None = None,
        secrets: Iterable[str] = (),
        check: bool = True,
    ) -> CommandResult:
        """Run a mutating command.

        Raises:
            ExternalCommandFailure: non-zero exit (with ``check``) or timeout.
            MissingDependency: the executable (or ``sudo``) does not exist.
        """
        cmd = self._wrap(list(argv), privileged=privileged, env_overrides=env_overrides)
        secrets = tuple(secrets)
        shown = format_argv(cmd, secrets)

        if self.dry_run:
            logger.info("[dry-run] %s", shown)
            return CommandResult(argv=cmd, returncode=0)

        logger.info("CMD %s", shown)
        result = self._execute(cmd, env_overrides, timeout, secrets)
        if check and not result.ok:
            raise ExternalCommandFailure(
                shown,
                returncode=result.returncode,
                stderr=_redact(result.stderr[-_OUTPUT_TAIL:], secrets),
            )
        return result

    def query(self, argv: Sequence[str], *, timeout: int = 30) -> CommandResult:
        """Run a read-only probe. Never escalated, never skipped by dry-run.

        A probe whose executable is missing reports exit code 127 rather
        than raising, matching what a shell would return.
        """
        cmd = list(argv)
        logger.debug("QUERY %s", format_argv(cmd))
        try:
            return self._execute(cmd, None, timeout, ())
        except MissingDependency:
            return CommandResult(argv=cmd, returncode=127)

    # ── Internals ───────────────────────────────────────────────

    def _wrap(
        self,
        cmd: list[str],
        *,
        privileged: bool,
        env_overrides: Mapping[str, str] | None,
    ) -> list[str]:
        if not privileged or not self.needs_escalation():
            return cmd
        if not self.dry_run and self.which(self.escalation[0]) is None:
            raise MissingDependency(
                self.escalation[0],
                "run as root or install it to allow privileged steps",
            )
        prefix = list(self.escalation)
        if env_overrides:
            prefix += ["env"] + [f"{k}={v}" for k, v in env_overrides.items()]
        return prefix + cmd

    def _execute(
        self,
        cmd: list[str],
        env_overrides: Mapping[str, str] | None,
        timeout: int | None,
        secrets: tuple[str, ...],
    ) -> CommandResult:
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)

        limit = timeout or self.timeout
        start = time.monotonic()
        try:
            p = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=limit,
                env=env,
            )
        except FileNotFoundError as e:
            raise MissingDependency(cmd[0], "ensure it is installed") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalCommandFailure(
                format_argv(cmd, secrets),
                reason=f"Command timed out ({limit}s)",
            ) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if p.stdout:
            logger.debug("STDOUT %s", _redact(p.stdout.strip(), secrets))
        if p.stderr:
            logger.debug("STDERR %s", _redact(p.stderr.strip(), secrets))

        return CommandResult(
            argv=cmd,
            returncode=p.returncode,
            stdout=p.stdout or "",
            stderr=p.stderr or "",
            elapsed_ms=elapsed_ms,
        )


def _redact(text: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, _REDACTED)
    return text
