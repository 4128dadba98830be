from __future__ import annotations

import json

import httpx
import pytest
import respx

from area.actions.base import HttpActionInvoker
from area.actions.github import CreateComment, CreateIssue
from area.dispatch.table import ActionError
from area.models.db import Credential

CREDENTIAL = Credential(user_id=1, provider="github", access_token="gho_test")


@pytest.mark.asyncio
@respx.mock
async def test_create_issue():
    route = respx.post("https://api.github.com/repos/octo/acme/issues").mock(
        return_value=httpx.Response(
            201,
            json={"number": 7, "html_url": "https://github.com/octo/acme/issues/7"},
        )
    )

    result = await CreateIssue().invoke(
        CREDENTIAL,
        {"owner": "octo", "repo": "acme", "title": "Bug", "body": "Details", "labels": "bug"},
    )

    assert result.summary == {"number": 7, "url": "https://github.com/octo/acme/issues/7"}
    request = route.calls.last.request
    assert request.headers["authorization"] == "Bearer gho_test"
    assert request.headers["accept"] == "application/vnd.github+json"
    assert json.loads(request.content) == {"title": "Bug", "body": "Details", "labels": ["bug"]}


@pytest.mark.asyncio
@respx.mock
async def test_create_issue_error_envelope():
    respx.post("https://api.github.com/repos/octo/acme/issues").mock(
        return_value=httpx.Response(404, json={"message": "Not Found"})
    )

    with pytest.raises(ActionError) as exc:
        await CreateIssue().invoke(CREDENTIAL, {"owner": "octo", "repo": "acme", "title": "Bug"})

    assert exc.value.status == 404
    assert "Not Found" in exc.value.body


@pytest.mark.asyncio
async def test_create_issue_requires_title():
    with pytest.raises(ActionError, match="'title'"):
        await CreateIssue().invoke(CREDENTIAL, {"owner": "octo", "repo": "acme", "title": ""})


@pytest.mark.asyncio
@respx.mock
async def test_create_comment_accepts_hash_prefixed_number():
    route = respx.post("https://api.github.com/repos/octo/acme/issues/42/comments").mock(
        return_value=httpx.Response(201, json={"id": 555, "html_url": "https://github.com/c/555"})
    )

    result = await CreateComment().invoke(
        CREDENTIAL,
        {"owner": "octo", "repo": "acme", "issue_number": "#42", "body": "Thanks!"},
    )

    assert result.summary == {"id": 555, "url": "https://github.com/c/555"}
    assert json.loads(route.calls.last.request.content) == {"body": "Thanks!"}


@pytest.mark.asyncio
async def test_create_comment_rejects_bad_number():
    with pytest.raises(ActionError, match="issue_number"):
        await CreateComment().invoke(
            CREDENTIAL,
            {"owner": "octo", "repo": "acme", "issue_number": "abc", "body": "x"},
        )


@pytest.mark.asyncio
@respx.mock
async def test_owner_and_repo_cannot_rewrite_the_path():
    bad = [
        {"owner": "..", "repo": "acme"},
        {"owner": "octo/evil", "repo": "acme"},
        {"owner": "octo", "repo": "acme?x=1"},
        {"owner": "octo", "repo": "."},
    ]
    for params in bad:
        with pytest.raises(ActionError, match="Invalid (owner|repo)"):
            await CreateIssue().invoke(CREDENTIAL, {**params, "title": "Bug"})

    with pytest.raises(ActionError, match="Invalid issue_number"):
        await CreateComment().invoke(
            CREDENTIAL,
            {"owner": "octo", "repo": "acme", "issue_number": "1/../../pulls", "body": "x"},
        )

    assert respx.calls.call_count == 0


def test_invoker_base_requires_build_request():
    with pytest.raises(TypeError):
        HttpActionInvoker()
