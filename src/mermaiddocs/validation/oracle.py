"""Adapters for an external full-grammar Mermaid parser."""

from __future__ import annotations

import logging
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol, Sequence, Tuple

from mermaiddocs.errors import DiagramSyntaxError, EnvironmentCondition, OracleEnvironmentError

LOGGER = logging.getLogger(__name__)

# Output fragments emitted by mermaid-cli when the host, not the diagram, is at fault.
_ENVIRONMENT_SIGNATURES: Tuple[Tuple[str, EnvironmentCondition], ...] = (
    ("Failed to launch the browser process", EnvironmentCondition.NO_BROWSER),
    ("Could not find Chrome", EnvironmentCondition.NO_BROWSER),
    ("Missing X server or $DISPLAY", EnvironmentCondition.NO_DISPLAY),
    ("document is not defined", EnvironmentCondition.NO_DOM),
    ("DOMPurify", EnvironmentCondition.NO_DOM),
)


class ParserOracle(Protocol):
    """Black-box parser: returns on success, raises on failure."""

    def parse(self, code: str) -> None:
        ...


def classify_environment_failure(output: str) -> EnvironmentCondition | None:
    for signature, condition in _ENVIRONMENT_SIGNATURES:
        if signature in output:
            return condition
    return None


class MermaidCliOracle:
    """Runs mermaid-cli (``mmdc``) on the diagram and reports its verdict."""

    def __init__(self, command: str | Sequence[str] = "mmdc") -> None:
        self.command = shlex.split(command) if isinstance(command, str) else list(command)

    def parse(self, code: str) -> None:
        with tempfile.TemporaryDirectory(prefix="mermaiddocs-") as tmp:
            source = Path(tmp) / "diagram.mmd"
            target = Path(tmp) / "diagram.svg"
            source.write_text(code, encoding="utf-8")
            try:
                completed = subprocess.run(
                    [*self.command, "--input", str(source), "--output", str(target), "--quiet"],
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise OracleEnvironmentError(
                    EnvironmentCondition.NO_PARSER, f"Parser command not found: {self.command[0]}"
                ) from exc

        if completed.returncode == 0:
            return

        output = (completed.stderr or completed.stdout or "").strip()
        condition = classify_environment_failure(output)
        if condition is not None:
            raise OracleEnvironmentError(condition, output)
        LOGGER.debug("Parser rejected diagram: %s", output)
        raise DiagramSyntaxError(_first_error_line(output) or "diagram failed to parse")


def _first_error_line(output: str) -> str:
    for line in output.splitlines():
        if "Error" in line or "error" in line:
            return line.strip()
    return output.splitlines()[0].strip() if output else ""
