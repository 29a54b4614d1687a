"""
Download adapter — fetch files with ``curl`` or ``wget``.

Downloads always land in scratch files owned by the invoking user.
Privileged destinations are reached afterwards with an explicit copy,
so the downloader itself never needs escalation.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator

from provisioner.adapters.shell.command import CommandRunner

logger = logging.getLogger(__name__)

# Preference order when more than one tool is on PATH.
DOWNLOAD_TOOLS = ("curl", "wget")


class Downloader:
    """Fetch URLs into local files through an external download tool."""

    def __init__(self, runner: CommandRunner, tool: str = "curl", timeout: int = 120):
        if tool not in DOWNLOAD_TOOLS:
            raise ValueError(f"Unsupported download tool: {tool}")
        self.runner = runner
        self.tool = tool
        self.timeout = timeout

    @classmethod
    def available_tool(cls, runner: CommandRunner) -> str | None:
        """Return the first download tool found on PATH, or None."""
        for tool in DOWNLOAD_TOOLS:
            if runner.which(tool):
                return tool
        return None

    def fetch(self, url: str, dest: Path) -> Path:
        """Download ``url`` into ``dest``.

        Raises:
            ExternalCommandFailure: the download tool exited non-zero.
        """
        if self.tool == "curl":
            argv = ["curl", "-fsSL", "--max-time", str(self.timeout), "-o", str(dest), url]
        else:
            argv = ["wget", "-q", "-T", str(self.timeout), "-O", str(dest), url]
        # Give the tool's own limit a head start before the runner kills it.
        self.runner.run(argv, timeout=self.timeout + 15)
        return dest


@contextlib.contextmanager
def scratch_file(prefix: str = "provision_", suffix: str = "") -> Iterator[Path]:
    """Yield a private temporary file path and delete it on exit.

    The file is removed whether the body succeeds or raises.
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        logger.debug("Removed scratch file %s", path)


def sha256_of(path: Path) -> str:
    """Hex SHA256 digest of a file."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()
