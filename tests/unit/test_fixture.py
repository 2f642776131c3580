"""
Unit tests for the git test fixture.
"""
import shutil
import subprocess
import pytest
from citools.fixture import FixtureBuilder, FixtureError
from citools.tooling_config import FixtureConfig


class TestFixtureSteps:
    """Test the git command sequence without running git."""

    def test_runs_steps_in_order(self, tmp_path, recording_executor):
        repo_dir = tmp_path / "fixture"
        FixtureBuilder(FixtureConfig(), recording_executor).init(repo_dir)

        assert recording_executor.commands == [
            ['git', 'init'],
            ['git', 'config', 'user.email', 'git-test@example.com'],
            ['git', 'config', 'user.name', 'Test'],
            ['git', 'add', 'README.md'],
            ['git', 'commit', '-m', 'initial commit'],
            ['git', 'rev-parse', 'HEAD'],
            ['git', 'remote', 'add', 'origin', 'https://github.com/NicolasDP/git'],
            ['git', 'fetch'],
        ]
        assert all(cwd == repo_dir for _, cwd in recording_executor.calls)

    def test_writes_readme(self, tmp_path, recording_executor):
        repo_dir = tmp_path / "fixture"
        FixtureBuilder(FixtureConfig(), recording_executor).init(repo_dir)

        assert (repo_dir / "README.md").read_text() == "README\n"

    def test_result_reports_commit_and_remote(self, tmp_path, recording_executor):
        result = FixtureBuilder(FixtureConfig(), recording_executor).init(tmp_path / "fixture")

        assert result.commit_sha == 'a' * 40
        assert result.remote_name == 'origin'
        assert result.remote_url == 'https://github.com/NicolasDP/git'
        assert result.fetched is True

    def test_fetch_can_be_disabled(self, tmp_path, recording_executor):
        config = FixtureConfig(fetch=False)
        result = FixtureBuilder(config, recording_executor).init(tmp_path / "fixture")

        assert ['git', 'fetch'] not in recording_executor.commands
        assert result.fetched is False

    def test_failing_step_raises_and_stops(self, tmp_path, make_executor):
        executor = make_executor(fail_on={'git commit': 1})

        with pytest.raises(FixtureError) as exc_info:
            FixtureBuilder(FixtureConfig(), executor).init(tmp_path / "fixture")

        assert "'commit'" in str(exc_info.value)
        assert executor.commands[-1][:2] == ['git', 'commit']

    def test_fetch_failure_is_reported(self, tmp_path, make_executor):
        executor = make_executor(fail_on={'git fetch': 128})

        with pytest.raises(FixtureError, match="'fetch'"):
            FixtureBuilder(FixtureConfig(), executor).init(tmp_path / "fixture")

    def test_readme_in_missing_subdirectory_raises(self, tmp_path, recording_executor):
        config = FixtureConfig(readme_name='sub/README.md')

        with pytest.raises(FixtureError, match="'write readme'"):
            FixtureBuilder(config, recording_executor).init(tmp_path / "fixture")

        assert ['git', 'add', 'sub/README.md'] not in recording_executor.commands

    def test_readme_path_is_a_directory_raises(self, tmp_path, recording_executor):
        repo_dir = tmp_path / "fixture"
        (repo_dir / "README.md").mkdir(parents=True)

        with pytest.raises(FixtureError, match="'write readme'"):
            FixtureBuilder(FixtureConfig(), recording_executor).init(repo_dir)

    def test_directory_blocked_by_file_raises(self, tmp_path, recording_executor):
        blocker = tmp_path / "fixture"
        blocker.write_text("not a directory")

        with pytest.raises(FixtureError, match="'create directory'"):
            FixtureBuilder(FixtureConfig(), recording_executor).init(blocker / "repo")

        assert recording_executor.commands == []


@pytest.mark.skipif(shutil.which('git') is None, reason="git not installed")
class TestFixtureWithGit:
    """Build a real fixture against a local remote."""

    def _git(self, cwd, *args):
        return subprocess.run(['git'] + list(args), cwd=cwd, capture_output=True, text=True, check=True).stdout

    def test_one_commit_and_origin_remote(self, tmp_path):
        remote = tmp_path / "remote.git"
        subprocess.run(['git', 'init', '--bare', str(remote)], capture_output=True, check=True)

        repo_dir = tmp_path / "fixture"
        config = FixtureConfig(remote_url=str(remote))
        result = FixtureBuilder(config).init(repo_dir)

        assert self._git(repo_dir, 'rev-list', '--count', 'HEAD').strip() == '1'
        assert self._git(repo_dir, 'remote').split() == ['origin']
        assert self._git(repo_dir, 'remote', 'get-url', 'origin').strip() == str(remote)
        assert self._git(repo_dir, 'rev-parse', 'HEAD').strip() == result.commit_sha
        assert self._git(repo_dir, 'log', '-1', '--format=%s|%ae|%an').strip() == \
            'initial commit|git-test@example.com|Test'
