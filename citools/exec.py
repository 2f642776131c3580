"""
External command execution for citools.

Every step of the CI chores is an opaque external binary (git, the doc
compiler, the pages importer). Commands are always run from argument lists,
never through a shell, and secrets are redacted from anything we print or raise.
"""
import subprocess
from typing import List, Optional, Iterable
from pathlib import Path


REDACTED = '***'


def redact(text: str, secrets: Iterable[Optional[str]]) -> str:
    """
    Replace every non-empty secret in text with a placeholder.

    Examples:
        >>> redact('https://abc@github.com/o/r.git', ['abc'])
        'https://***@github.com/o/r.git'

        >>> redact('nothing to hide', [None, ''])
        'nothing to hide'
    """
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


class CommandError(Exception):
    """Raised when an external command fails or cannot be started."""

    def __init__(self, command: str, returncode: int, stderr: str = ''):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {command}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class CommandExecutor:
    """Runs external commands with captured output and redacted errors."""

    def __init__(self, cwd: Path, secrets: Optional[List[str]] = None):
        self.cwd = cwd
        self.secrets = [s for s in (secrets or []) if s]

    def add_secret(self, secret: Optional[str]):
        """Register a value that must never appear in output or errors."""
        if secret and secret not in self.secrets:
            self.secrets.append(secret)

    def describe(self, command: List[str]) -> str:
        """Printable, redacted form of a command."""
        return redact(' '.join(command), self.secrets)

    def run(self, command: List[str], cwd: Optional[Path] = None, check: bool = True) -> subprocess.CompletedProcess:
        """
        Run a command from a list of arguments.

        Args:
            command: Command as list of arguments
            cwd: Working directory (defaults to the executor's cwd)
            check: Raise CommandError on non-zero exit

        Returns:
            CompletedProcess result

        Raises:
            CommandError: If the binary is missing, or exits non-zero and check=True
        """
        if cwd is None:
            cwd = self.cwd

        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True
            )
        except FileNotFoundError:
            # Same code a shell reports for an unknown command
            raise CommandError(self.describe(command), 127, f"{command[0]}: command not found")

        if check and result.returncode != 0:
            raise CommandError(
                self.describe(command),
                result.returncode,
                redact(result.stderr or '', self.secrets)
            )

        return result
