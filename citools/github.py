"""
GitHub helpers for citools.
Builds authenticated push URLs and looks up where Pages are served.
"""
import logging
from typing import Optional, Tuple
import requests


logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"


def parse_repo_slug(slug: str) -> Tuple[str, str]:
    """
    Split an "owner/repo" slug.

    Raises:
        ValueError: If the slug is not exactly two non-empty parts
    """
    parts = slug.split('/') if slug else []
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid repository slug: {slug!r} (expected owner/repo)")
    return parts[0], parts[1]


def build_push_url(token: str, slug: str) -> str:
    """
    Build the token-authenticated HTTPS URL used to push pages.

    The result embeds the token; callers must redact it before logging.
    """
    owner, repo = parse_repo_slug(slug)
    return f"https://{token}@github.com/{owner}/{repo}.git"


class PagesClient:
    """Queries the GitHub Pages API for a repository."""

    def __init__(self, repo_slug: str, token: Optional[str] = None, timeout: float = 10.0):
        owner, repo = parse_repo_slug(repo_slug)
        self.api_url = f"{API_BASE}/repos/{owner}/{repo}/pages"
        self.token = token
        self.timeout = timeout

    def get_pages_url(self) -> Optional[str]:
        """
        Return the public Pages URL, or None if unavailable.

        Best-effort: network errors and non-200 responses are logged, not raised.
        """
        headers = {'Accept': 'application/vnd.github.v3+json'}
        if self.token:
            headers['Authorization'] = f'token {self.token}'

        try:
            response = requests.get(self.api_url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Pages lookup failed: {type(e).__name__}")
            return None

        if response.status_code != 200:
            logger.info(f"Pages lookup returned {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("Pages lookup returned a non-JSON body")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Pages lookup returned {type(data).__name__}, expected an object")
            return None

        return data.get('html_url')
