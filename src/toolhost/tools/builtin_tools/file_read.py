from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..base import ToolSpec, ToolResult
from ..schema import ParamSpec
from ...errors import LocalIOError, SandboxViolation
from ...util.fs import resolve_in_sandbox, read_text, SANDBOX_DENIED_MESSAGE

logger = logging.getLogger(__name__)

@dataclass
class ReadFileTool:
    """Return the full text of a file inside the sandbox directory.

    Every read failure (missing, unreadable, directory, not UTF-8) gets the
    same answer so callers cannot probe the directory layout.
    """

    files_dir: Path
    spec: ToolSpec = field(default=ToolSpec(
        name="read_file",
        description="Read a text file from the files/ folder inside this project",
        parameters=(
            ParamSpec("filename", "string", "The filename to read, e.g. 'aboutme.txt'", required=True),
        ),
    ))

    def execute(self, args: dict[str, Any]) -> ToolResult:
        filename = args["filename"]
        try:
            p = resolve_in_sandbox(self.files_dir, filename)
        except SandboxViolation:
            logger.warning("read_file: rejected path outside sandbox: %r", filename)
            return ToolResult.failure(SANDBOX_DENIED_MESSAGE)

        try:
            text = read_text(p)
        except LocalIOError as e:
            logger.info("read_file: %r unreadable: %s", filename, e)
            return ToolResult.failure(f'File not found: "{filename}" does not exist in the files/ directory')
        return ToolResult.success(text)
