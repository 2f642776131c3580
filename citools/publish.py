"""
Documentation publisher for citools.

On a push build of the publish branch: build docs, add a redirect landing
page, import the output into the pages branch and force-push it to GitHub.
Any other build is a no-op that succeeds.
"""
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass

from citools.ci_env import CIEnvironment
from citools.exec import CommandExecutor, CommandError
from citools.github import build_push_url, PagesClient
from citools.tooling_config import PublishConfig


class PublishError(Exception):
    """Raised when publishing cannot start or a publish step fails."""

    def __init__(self, message: str, exit_code: int = 1):
        self.exit_code = exit_code
        super().__init__(message)


@dataclass
class PublishResult:
    """Outcome of a publish run."""
    skipped: bool
    reason: str
    exit_code: int = 0
    pages_url: Optional[str] = None


def redirect_page(target: str) -> str:
    """HTML for the landing page that forwards to the crate docs."""
    return f"<meta http-equiv=refresh content=0;url={target}>\n"


class DocsPublisher:
    """Builds and publishes documentation to a pages branch."""

    def __init__(self, config: Optional[PublishConfig] = None, ci_env: Optional[CIEnvironment] = None,
                 executor: Optional[CommandExecutor] = None, pages_client: Optional[PagesClient] = None):
        self.config = config or PublishConfig()
        self.ci_env = ci_env or CIEnvironment.from_env()
        self.executor = executor
        self.pages_client = pages_client

    def _step(self, name: str, command: List[str], workdir: Path) -> int:
        print(f"▶️  {name}: {self.executor.describe(command)}")
        try:
            result = self.executor.run(command, cwd=workdir)
        except CommandError as e:
            raise PublishError(f"Publish step '{name}' failed: {e}", exit_code=e.returncode) from e
        return result.returncode

    def write_redirect(self, workdir: Path) -> Path:
        """Write index.html into the doc output directory."""
        doc_dir = workdir / self.config.doc_dir
        if not doc_dir.is_dir():
            raise PublishError(f"Documentation output not found: {doc_dir}")

        index_path = doc_dir / 'index.html'
        try:
            index_path.write_text(redirect_page(self.config.redirect_target))
        except OSError as e:
            raise PublishError(f"Publish step 'write redirect' failed: {e}") from e
        return index_path

    def publish(self, workdir: Path) -> PublishResult:
        """
        Run the publish sequence in workdir.

        Returns:
            PublishResult; skipped with exit_code 0 when the CI guards fail

        Raises:
            PublishError: If settings are missing or a step fails
        """
        cfg = self.config
        workdir = Path(workdir)

        allowed, reason = self.ci_env.should_publish(cfg.publish_branch)
        if not allowed:
            print(f"⏭️  Skipping docs publish: {reason}")
            return PublishResult(skipped=True, reason=reason, exit_code=0)

        missing = self.ci_env.missing_publish_settings()
        if missing:
            raise PublishError(f"Cannot publish docs, missing: {', '.join(missing)}")

        if self.executor is None:
            self.executor = CommandExecutor(workdir)
        self.executor.add_secret(self.ci_env.token)

        push_url = build_push_url(self.ci_env.token, self.ci_env.repo_slug)

        self._step('build docs', cfg.doc_command, workdir)

        index_path = self.write_redirect(workdir)
        print(f"📝 Wrote redirect {index_path} -> {cfg.redirect_target}")

        if cfg.install_command:
            self._step('install importer', cfg.install_command, workdir)

        self._step('import pages', cfg.import_command + [cfg.doc_dir], workdir)
        exit_code = self._step('push pages', ['git', 'push', '-fq', push_url, cfg.pages_branch], workdir)

        print(f"✅ Docs published to {self.ci_env.repo_slug} ({cfg.pages_branch})")

        if self.pages_client is None:
            self.pages_client = PagesClient(self.ci_env.repo_slug, self.ci_env.token)
        pages_url = self.pages_client.get_pages_url()
        if pages_url:
            print(f"🌐 Served at {pages_url}")

        return PublishResult(skipped=False, reason=reason, exit_code=exit_code, pages_url=pages_url)
