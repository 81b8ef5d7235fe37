"""GitHub API client for label management."""

import os
from typing import Optional

from github import Github, GithubException
from github.Label import Label
from github.Repository import Repository

from ...core.config import GitHubConfig, LabelDefinition
from .labels import LabelBackend


class GitHubLabelBackend(LabelBackend):
    """Label operations through the GitHub REST API (PyGithub)."""

    def __init__(self, config: GitHubConfig, gh: Optional[Github] = None):
        self.config = config
        self.gh = gh or Github(config.token or os.environ.get("GITHUB_TOKEN"))
        self.repo: Repository = self.gh.get_repo(config.full_name)

    def _get(self, name: str) -> Optional[Label]:
        try:
            return self.repo.get_label(name)
        except GithubException as e:
            if e.status == 404:
                return None
            raise

    def get_label(self, name: str) -> Optional[LabelDefinition]:
        label = self._get(name)
        if label is None:
            return None
        return LabelDefinition(
            name=label.name,
            color=label.color,
            description=label.description or "",
        )

    def create_label(self, label: LabelDefinition) -> None:
        self.repo.create_label(
            name=label.name,
            color=label.color,
            description=label.description,
        )

    def update_label(self, label: LabelDefinition) -> None:
        existing = self._get(label.name)
        if existing is None:
            raise GithubException(404, {"message": f"Label not found: {label.name}"}, None)
        existing.edit(
            name=label.name,
            color=label.color,
            description=label.description,
        )
