from __future__ import annotations

import re
from typing import Any

from area.actions.base import HttpActionInvoker, path_segment, require
from area.models.db import Credential, Provider
from area.models.schemas import ConfigValue

GITHUB_API_URL = "https://api.github.com"

# Owner and repository names as GitHub allows them
NAME = re.compile(r"[A-Za-z0-9_.-]+")
ISSUE_NUMBER = re.compile(r"[0-9]+")


class _GitHubInvoker(HttpActionInvoker):
    provider = Provider.GITHUB
    default_base_url = GITHUB_API_URL

    def headers(self, credential: Credential) -> dict[str, str]:
        return {
            **super().headers(credential),
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def repo_path(self, config: dict[str, ConfigValue]) -> str:
        owner = path_segment(config, "owner", NAME)
        repo = path_segment(config, "repo", NAME)
        return f"/repos/{owner}/{repo}"


class CreateIssue(_GitHubInvoker):
    def build_request(self, config: dict[str, ConfigValue]) -> tuple[str, dict[str, Any]]:
        path = self.repo_path(config)
        body: dict[str, Any] = {"title": require(config, "title")}
        if config.get("body"):
            body["body"] = config["body"]
        labels = config.get("labels")
        if labels:
            body["labels"] = [labels] if isinstance(labels, str) else list(labels)
        return f"{path}/issues", body

    def summarize(self, data: dict[str, Any]) -> dict[str, Any]:
        return {"number": data.get("number"), "url": data.get("html_url")}


class CreateComment(_GitHubInvoker):
    def build_request(self, config: dict[str, ConfigValue]) -> tuple[str, dict[str, Any]]:
        path = self.repo_path(config)
        if isinstance(config.get("issue_number"), str):
            config = {**config, "issue_number": config["issue_number"].lstrip("#")}
        number = path_segment(config, "issue_number", ISSUE_NUMBER)
        return f"{path}/issues/{number}/comments", {"body": require(config, "body")}

    def summarize(self, data: dict[str, Any]) -> dict[str, Any]:
        return {"id": data.get("id"), "url": data.get("html_url")}
