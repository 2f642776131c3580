"""
CI build metadata for citools.

Reads the Travis CI environment and decides whether the current build is
allowed to publish documentation.
"""
import os
from dataclasses import dataclass
from typing import Optional, Mapping, Tuple, List


@dataclass
class CIEnvironment:
    """Build metadata provided by the CI service."""
    branch: Optional[str] = None
    pull_request: Optional[str] = None
    token: Optional[str] = None
    repo_slug: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'CIEnvironment':
        """Build from TRAVIS_* / GH_TOKEN variables (defaults to os.environ)."""
        if environ is None:
            environ = os.environ

        return cls(
            branch=environ.get('TRAVIS_BRANCH'),
            pull_request=environ.get('TRAVIS_PULL_REQUEST'),
            token=environ.get('GH_TOKEN'),
            repo_slug=environ.get('TRAVIS_REPO_SLUG')
        )

    def should_publish(self, publish_branch: str = 'master') -> Tuple[bool, str]:
        """
        Apply the CI branch guards.

        Both checks are exact string comparisons: the build must be for
        publish_branch and TRAVIS_PULL_REQUEST must be the literal "false".

        Returns:
            Tuple of (allowed, reason)
        """
        if self.branch != publish_branch:
            return False, f"branch is {self.branch!r}, not {publish_branch!r}"

        if self.pull_request != 'false':
            return False, f"pull request build ({self.pull_request!r})"

        return True, f"push build on {publish_branch}"

    def missing_publish_settings(self) -> List[str]:
        """Names of variables required for pushing pages that are unset."""
        missing = []
        if not self.token:
            missing.append('GH_TOKEN')
        if not self.repo_slug:
            missing.append('TRAVIS_REPO_SLUG')
        return missing
