"""
Git test fixture for citools.

Creates a throwaway repository with one commit and an `origin` remote,
the layout the repository's integration tests expect.
"""
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from citools.exec import CommandExecutor, CommandError
from citools.tooling_config import FixtureConfig


class FixtureError(Exception):
    """Raised when a fixture setup step fails."""
    pass


@dataclass
class FixtureResult:
    """Outcome of a fixture init."""
    directory: Path
    commit_sha: str
    remote_name: str
    remote_url: str
    fetched: bool


class FixtureBuilder:
    """
    Initializes a git fixture repository.

    Steps run strictly in order and stop at the first failure. Nothing is
    rolled back: a half-built fixture is left in place for inspection.
    """

    def __init__(self, config: Optional[FixtureConfig] = None, executor: Optional[CommandExecutor] = None):
        self.config = config or FixtureConfig()
        self.executor = executor

    def _git(self, step: str, args, directory: Path):
        try:
            return self.executor.run(['git'] + args, cwd=directory)
        except CommandError as e:
            raise FixtureError(f"Fixture step '{step}' failed: {e}") from e

    def init(self, directory: Path) -> FixtureResult:
        """
        Build the fixture in directory (created if missing).

        Raises:
            FixtureError: If any step fails
        """
        cfg = self.config
        directory = Path(directory)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FixtureError(f"Fixture step 'create directory' failed: {e}") from e

        if self.executor is None:
            self.executor = CommandExecutor(directory)

        print(f"📁 Initializing fixture repository at {directory}")
        self._git('init', ['init'], directory)
        self._git('config email', ['config', 'user.email', cfg.user_email], directory)
        self._git('config name', ['config', 'user.name', cfg.user_name], directory)

        try:
            (directory / cfg.readme_name).write_text(cfg.readme_content)
        except OSError as e:
            raise FixtureError(f"Fixture step 'write readme' failed: {e}") from e
        self._git('add', ['add', cfg.readme_name], directory)
        self._git('commit', ['commit', '-m', cfg.commit_message], directory)

        sha = self._git('rev-parse', ['rev-parse', 'HEAD'], directory).stdout.strip()
        print(f"✅ Committed {cfg.readme_name}: {sha[:12]}")

        self._git('remote add', ['remote', 'add', cfg.remote_name, cfg.remote_url], directory)

        if cfg.fetch:
            print(f"📥 Fetching from {cfg.remote_name} ({cfg.remote_url})...")
            self._git('fetch', ['fetch'], directory)
            print("✅ Fetch complete")

        return FixtureResult(
            directory=directory,
            commit_sha=sha,
            remote_name=cfg.remote_name,
            remote_url=cfg.remote_url,
            fetched=cfg.fetch
        )
