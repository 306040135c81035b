"""Infrastructure: deliver the encrypted artifact.

Rules
-----
* The stream target receives the raw artifact bytes and nothing else.
* File targets are overwritten without prompting.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO

from tlock_wrap.core.models import OutputTarget
from tlock_wrap.exceptions import OutputWriteError


def write_artifact(
    artifact: bytes,
    target: OutputTarget,
    *,
    stream: BinaryIO | None = None,
) -> Path | None:
    """Write *artifact* verbatim to *target*.

    Parameters
    ----------
    artifact:
        The opaque ciphertext.
    target:
        Stream or file destination.
    stream:
        Binary stream used for the stream target.  Defaults to
        ``sys.stdout.buffer`` resolved at call time.

    Returns
    -------
    Path | None
        The written file, or ``None`` for the stream target.

    Raises
    ------
    OutputWriteError
        When the artifact cannot be written.
    """
    if target.path is None:
        out = stream if stream is not None else sys.stdout.buffer
        try:
            out.write(artifact)
            out.flush()
        except OSError as exc:
            raise OutputWriteError(f"Could not write to standard output: {exc}") from exc
        return None

    path = target.path
    try:
        path.write_bytes(artifact)
    except OSError as exc:
        raise OutputWriteError(
            f"Could not write {path}: {exc.strerror or exc}",
            hint="Check that the directory exists and is writable.",
        ) from exc
    return path
