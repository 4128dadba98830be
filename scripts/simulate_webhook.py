#!/usr/bin/env python3
"""Fire a fake GitHub issues webhook to test dispatch locally."""

import argparse
import hashlib
import hmac
import json
import uuid

import httpx


def main():
    parser = argparse.ArgumentParser(description="Simulate a GitHub 'issues' webhook")
    parser.add_argument("--url", default="http://localhost:8000/webhooks/github")
    parser.add_argument("--hook-id", default="test-hook-001")
    parser.add_argument("--issue-number", type=int, default=42)
    parser.add_argument("--repo", default="acme")
    parser.add_argument("--secret", default="", help="shared X-Webhook-Secret")
    parser.add_argument("--signing-secret", default="", help="GitHub webhook signing secret")
    args = parser.parse_args()

    payload = {
        "action": "opened",
        "issue": {
            "number": args.issue_number,
            "title": "Something is broken",
            "html_url": f"https://github.com/octo/{args.repo}/issues/{args.issue_number}",
            "user": {"login": "octocat"},
        },
        "repository": {"name": args.repo, "full_name": f"octo/{args.repo}"},
    }
    body = json.dumps(payload).encode()

    headers = {
        "Content-Type": "application/json",
        "X-GitHub-Event": "issues",
        "X-GitHub-Hook-ID": args.hook_id,
        "X-GitHub-Delivery": str(uuid.uuid4()),
    }
    if args.secret:
        headers["x-webhook-secret"] = args.secret
    if args.signing_secret:
        digest = hmac.new(args.signing_secret.encode(), body, hashlib.sha256).hexdigest()
        headers["X-Hub-Signature-256"] = f"sha256={digest}"

    resp = httpx.post(args.url, content=body, headers=headers)
    print(f"Status: {resp.status_code}")
    print(f"Response: {resp.json()}")


if __name__ == "__main__":
    main()
