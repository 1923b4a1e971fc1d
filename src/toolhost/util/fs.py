from __future__ import annotations

import os
from pathlib import Path

from ..errors import LocalIOError, SandboxViolation

SANDBOX_DENIED_MESSAGE = "Access denied: path is outside the sandbox directory."


def resolve_in_sandbox(root: Path | str, path_str: str) -> Path:
    """Join `path_str` onto `root` and prove the result stays inside `root`.

    Normalization is purely lexical (`.` and `..` are folded, symlinks are
    not followed) so the guard never touches the disk. An absolute
    `path_str` replaces the root entirely and is then checked like any
    other candidate.
    """
    base = os.path.normpath(os.path.abspath(os.fspath(root)))
    candidate = os.path.normpath(os.path.join(base, path_str))
    # "/files" must not admit "/files-secret"
    prefix = base if base.endswith(os.sep) else base + os.sep
    if candidate != base and not candidate.startswith(prefix):
        raise SandboxViolation(SANDBOX_DENIED_MESSAGE)
    return Path(candidate)


def read_text(path: Path) -> str:
    # bytes + strict decode: no newline translation, undecodable files fail
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise LocalIOError(str(e)) from e
