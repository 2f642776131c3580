"""
Pytest configuration for unit tests.

Sets up test-wide fixtures and environment configuration.
"""
import subprocess
import pytest
import os
from pathlib import Path

from citools.exec import CommandExecutor, CommandError

# Keep CI metadata from the machine running the tests out of the unit tests
for _var in ("TRAVIS_BRANCH", "TRAVIS_PULL_REQUEST", "GH_TOKEN", "TRAVIS_REPO_SLUG", "CITOOLS_CONFIG"):
    os.environ.pop(_var, None)


class RecordingExecutor(CommandExecutor):
    """Executor that records commands instead of running them."""

    def __init__(self, cwd: Path, fail_on=None, stdout=None):
        super().__init__(cwd)
        self.calls = []
        self.fail_on = fail_on or {}
        self.stdout = stdout or {}

    def _key(self, command):
        return ' '.join(command[:2])

    def run(self, command, cwd=None, check=True):
        self.calls.append((list(command), cwd))
        key = self._key(command)
        returncode = self.fail_on.get(key, 0)
        result = subprocess.CompletedProcess(command, returncode, self.stdout.get(key, ''), '')
        if check and returncode != 0:
            raise CommandError(self.describe(command), returncode, 'simulated failure')
        return result

    @property
    def commands(self):
        return [command for command, _ in self.calls]


@pytest.fixture
def recording_executor(tmp_path):
    """Executor that records commands; rev-parse reports a fixed SHA."""
    return RecordingExecutor(tmp_path, stdout={'git rev-parse': 'a' * 40 + '\n'})


@pytest.fixture
def ci_env_vars():
    """Environment of a master push build."""
    return {
        'TRAVIS_BRANCH': 'master',
        'TRAVIS_PULL_REQUEST': 'false',
        'GH_TOKEN': 'ghp_secret123',
        'TRAVIS_REPO_SLUG': 'NicolasDP/git'
    }


@pytest.fixture
def make_executor(tmp_path):
    """Factory for recording executors with simulated failures."""
    def factory(fail_on=None):
        return RecordingExecutor(tmp_path, fail_on=fail_on, stdout={'git rev-parse': 'b' * 40 + '\n'})
    return factory
