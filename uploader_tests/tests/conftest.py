import base64
import hashlib
import json

import httpx
import pytest

from clients.github import RepositoryGateway
from core.models import UploadConfig


TOKEN = "ghp_test_token"
OWNER = "octocat"
REPO = "hello-world"


class FakeGitHub:
    """In-memory stand-in for the GitHub REST endpoints the uploader calls.

    Served through httpx.MockTransport. Files are keyed by
    (owner, repo, branch, path); writes follow GitHub's sha rules.
    """

    def __init__(self, *, token: str = TOKEN, login: str = OWNER, repos=(REPO,)) -> None:
        self.token = token
        self.login = login
        self.repos = {(login, name) for name in repos}
        self.files = {}
        self.requests = []
        # path -> status code returned for PUT (simulated write failures)
        self.put_failures = {}
        # path -> status code returned for GET contents (simulated lookup failures)
        self.lookup_failures = {}
        # repo name -> number of GETs that still report 404 after creation
        self.pending_visibility = {}
        self.hidden_after_create = 0

    # --- helpers for tests ---

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def gateway(self, token: str = TOKEN) -> RepositoryGateway:
        return RepositoryGateway(token, base_url="https://api.github.test", transport=self.transport())

    def seed(self, path: str, content: bytes, *, branch: str = "main", owner: str = OWNER, repo: str = REPO) -> str:
        encoded = base64.b64encode(content).decode("ascii")
        sha = self._sha(path, encoded)
        self.files[(owner, repo, branch, path)] = (sha, encoded)
        return sha

    def content_of(self, path: str, *, branch: str = "main", owner: str = OWNER, repo: str = REPO) -> bytes:
        _, encoded = self.files[(owner, repo, branch, path)]
        return base64.b64decode(encoded)

    def puts(self):
        return [r for r in self.requests if r["method"] == "PUT"]

    # --- transport ---

    @staticmethod
    def _sha(path: str, encoded: str) -> str:
        return hashlib.sha1(f"{path}:{encoded}".encode("utf-8")).hexdigest()

    @staticmethod
    def _json(status: int, payload) -> httpx.Response:
        return httpx.Response(status, json=payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append(
            {
                "method": request.method,
                "path": request.url.path,
                "params": dict(request.url.params),
                "headers": dict(request.headers),
                "json": body,
            }
        )

        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return self._json(401, {"message": "Bad credentials"})

        parts = request.url.path.strip("/").split("/")

        if request.method == "POST" and parts == ["user", "repos"]:
            return self._create_repo(body or {})

        if len(parts) >= 3 and parts[0] == "repos":
            owner, repo = parts[1], parts[2]
            if len(parts) == 3 and request.method == "GET":
                return self._get_repo(owner, repo)
            if len(parts) > 4 and parts[3] == "contents":
                path = "/".join(parts[4:])
                if (owner, repo) not in self.repos:
                    return self._json(404, {"message": "Not Found"})
                if request.method == "GET":
                    return self._get_contents(owner, repo, path, request.url.params.get("ref") or "main")
                if request.method == "PUT":
                    return self._put_contents(owner, repo, path, body or {})

        return self._json(404, {"message": "Not Found"})

    def _get_repo(self, owner: str, repo: str) -> httpx.Response:
        if (owner, repo) not in self.repos:
            return self._json(404, {"message": "Not Found"})
        if self.pending_visibility.get(repo, 0) > 0:
            self.pending_visibility[repo] -= 1
            return self._json(404, {"message": "Not Found"})
        return self._json(200, {"name": repo, "full_name": f"{owner}/{repo}", "default_branch": "main"})

    def _create_repo(self, body: dict) -> httpx.Response:
        name = body.get("name")
        if (self.login, name) in self.repos:
            return self._json(422, {"message": "Repository creation failed."})
        self.repos.add((self.login, name))
        if self.hidden_after_create:
            self.pending_visibility[name] = self.hidden_after_create
        return self._json(
            201,
            {
                "name": name,
                "full_name": f"{self.login}/{name}",
                "private": body.get("private"),
                "auto_init": body.get("auto_init"),
                "html_url": f"https://github.com/{self.login}/{name}",
            },
        )

    def _get_contents(self, owner: str, repo: str, path: str, branch: str) -> httpx.Response:
        if path in self.lookup_failures:
            return self._json(self.lookup_failures[path], {"message": "Server Error"})
        entry = self.files.get((owner, repo, branch, path))
        if entry is None:
            return self._json(404, {"message": "Not Found"})
        sha, encoded = entry
        return self._json(200, {"type": "file", "path": path, "sha": sha, "content": encoded})

    def _put_contents(self, owner: str, repo: str, path: str, body: dict) -> httpx.Response:
        if path in self.put_failures:
            return self._json(self.put_failures[path], {"message": "Server Error"})

        branch = body.get("branch") or "main"
        key = (owner, repo, branch, path)
        existing = self.files.get(key)
        sent_sha = body.get("sha")

        if existing is not None and not sent_sha:
            return self._json(422, {"message": 'Invalid request.\n\n"sha" wasn\'t supplied.'})
        if existing is not None and sent_sha != existing[0]:
            return self._json(409, {"message": f"{path} does not match {sent_sha}"})
        if existing is None and sent_sha:
            return self._json(409, {"message": f"{path} does not exist"})

        encoded = body["content"]
        sha = self._sha(path, encoded)
        self.files[key] = (sha, encoded)
        return self._json(
            200 if existing else 201,
            {
                "content": {
                    "path": path,
                    "sha": sha,
                    "html_url": f"https://github.com/{owner}/{repo}/blob/{branch}/{path}",
                },
                "commit": {"message": body.get("message")},
            },
        )


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def upload_config():
    return UploadConfig(token=TOKEN, owner=OWNER, repo=REPO, branch="main", message="test upload")
