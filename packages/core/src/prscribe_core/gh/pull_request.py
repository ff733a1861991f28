from __future__ import annotations

import logging

from github import Auth, Github, GithubException

logger = logging.getLogger(__name__)


def get_github(config: dict) -> Github:
    """Build an authenticated client, preferring a plain token over GitHub App credentials."""
    token = config.get("github_token")
    if token:
        return Github(auth=Auth.Token(token))

    app_auth = Auth.AppAuth(int(config["github_app_id"]), config["github_private_key"])
    return Github(auth=app_auth.get_installation_auth(int(config["github_installation_id"])))


def is_not_found(exc: GithubException) -> bool:
    return exc.status == 404


class GitHubHost:
    """The handful of GitHub calls the review pipeline makes.

    Every method is synchronous (PyGithub is); callers that need concurrency
    run them in worker threads.
    """

    def __init__(self, github: Github):
        self.github = github

    def _repo(self, owner: str, repo: str):
        # lazy=True skips the GET /repos/{owner}/{repo} round-trip; the
        # follow-up call fails with the same 404 if the repo does not exist.
        return self.github.get_repo(f"{owner}/{repo}", lazy=True)

    def get_pull(self, owner: str, repo: str, pull_number: int):
        return self._repo(owner, repo).get_pull(pull_number)

    def list_files(self, owner: str, repo: str, pull_number: int) -> list:
        return list(self.get_pull(owner, repo, pull_number).get_files())

    def get_content(self, owner: str, repo: str, path: str, ref: str) -> str | None:
        """Return the decoded file at ``ref``, or None when it does not exist there.

        Any error other than a 404 propagates.
        """
        try:
            contents = self._repo(owner, repo).get_contents(path, ref=ref)
        except GithubException as e:
            if is_not_found(e):
                logger.info("File %s not found at ref %s", path, ref)
                return None
            raise
        if isinstance(contents, list):
            # A directory listing, e.g. a submodule path.
            return None
        return contents.decoded_content.decode("utf-8", errors="replace")

    def list_commit_messages(self, owner: str, repo: str, pull_number: int) -> list[str]:
        return [c.commit.message for c in self.get_pull(owner, repo, pull_number).get_commits()]

    def create_comment(self, owner: str, repo: str, issue_number: int, body: str) -> int:
        comment = self._repo(owner, repo).get_issue(issue_number).create_comment(body)
        return comment.id

    def update_comment(self, owner: str, repo: str, issue_number: int, comment_id: int, body: str) -> None:
        self._repo(owner, repo).get_issue(issue_number).get_comment(comment_id).edit(body)
