"""
Vendor script integrity verification.

Vendor installers are downloaded to a scratch file and checked before
they run, replacing the unsafe ``curl ... | bash`` pattern. When an
expected SHA256 is configured a mismatch aborts the run and the script
is never executed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from provisioner.adapters.shell.download import sha256_of
from provisioner.core.errors import ExternalCommandFailure

logger = logging.getLogger(__name__)


def verify_script(path: Path, expected_sha256: str | None, source: str) -> str:
    """Verify a downloaded script and make it executable by its owner.

    Args:
        path: Downloaded script.
        expected_sha256: Expected hex digest; a ``sha256:`` prefix is
            accepted. ``None`` skips the comparison with a warning.
        source: URL the script came from, for messages.

    Returns:
        The actual SHA256 hex digest.

    Raises:
        ExternalCommandFailure: the file is empty or the digest does not match.
    """
    if path.stat().st_size == 0:
        raise ExternalCommandFailure(source, reason="Downloaded script is empty")

    actual = sha256_of(path)

    if expected_sha256:
        # Normalize — strip "sha256:" prefix if present
        expected = expected_sha256.removeprefix("sha256:").strip().lower()
        if actual != expected:
            raise ExternalCommandFailure(
                source,
                reason=(
                    "SHA256 mismatch, the script may have been tampered with "
                    f"(expected {expected}, got {actual})"
                ),
            )
        logger.info("Verified %s (sha256 %s)", source, actual)
    else:
        logger.warning(
            "No checksum configured for %s; running unverified script (sha256 %s)",
            source,
            actual,
        )

    os.chmod(path, 0o700)
    return actual
