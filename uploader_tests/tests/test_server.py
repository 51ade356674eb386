import pytest
from fastapi.testclient import TestClient

from server.server import create_app

TOKEN = "ghp_test_token"
OWNER = "octocat"
REPO = "hello-world"


@pytest.fixture
def staging_dir(tmp_path):
    return tmp_path / "staging"


@pytest.fixture
def client(fake_github, staging_dir):
    app = create_app(gateway_factory=fake_github.gateway, staging_dir=staging_dir)
    return TestClient(app)


def _form(**overrides):
    form = {
        "token": TOKEN,
        "username": OWNER,
        "repoName": REPO,
        "branch": "main",
        "message": "web upload",
        "path": "",
        "relativePath": "",
    }
    form.update(overrides)
    return form


def _staged(staging_dir):
    return list(staging_dir.iterdir()) if staging_dir.exists() else []


# ---------------------------
# health / page
# ---------------------------

def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["timestamp"]


def test_index_serves_upload_page(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "app.js" in resp.text


def test_static_assets_are_served(client):
    assert client.get("/static/app.js").status_code == 200
    assert client.get("/static/style.css").status_code == 200


# ---------------------------
# check-repo
# ---------------------------

def test_check_repo_exists(client):
    resp = client.post("/api/check-repo", json={"token": TOKEN, "username": OWNER, "repoName": REPO})

    assert resp.status_code == 200
    assert resp.json() == {"exists": True}


def test_check_repo_missing(client):
    resp = client.post("/api/check-repo", json={"token": TOKEN, "username": OWNER, "repoName": "nope"})

    assert resp.status_code == 200
    assert resp.json() == {"exists": False}


def test_check_repo_requires_configuration(client, fake_github):
    resp = client.post("/api/check-repo", json={"token": TOKEN, "username": "", "repoName": REPO})

    assert resp.status_code == 400
    body = resp.json()
    assert body["exists"] is False
    assert "username" in body["error"]
    assert fake_github.requests == []


# ---------------------------
# create-repo
# ---------------------------

def test_create_repo_success(client, fake_github):
    resp = client.post("/api/create-repo", json={"token": TOKEN, "repoName": "fresh", "visibility": "public"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["name"] == "fresh"
    sent = fake_github.requests[-1]["json"]
    assert sent == {"name": "fresh", "private": False, "auto_init": True}


def test_create_repo_defaults_to_private(client, fake_github):
    client.post("/api/create-repo", json={"token": TOKEN, "repoName": "fresh"})

    assert fake_github.requests[-1]["json"]["private"] is True


def test_create_repo_conflict_relays_github_message(client):
    resp = client.post("/api/create-repo", json={"token": TOKEN, "repoName": REPO})

    assert resp.json() == {"success": False, "error": "Repository creation failed."}


@pytest.mark.parametrize(
    "payload",
    [
        {"token": TOKEN, "repoName": "fresh", "visibility": "internal"},
        {"token": "", "repoName": "fresh"},
        {"token": TOKEN, "repoName": "  "},
    ],
)
def test_create_repo_rejects_bad_input(client, fake_github, payload):
    resp = client.post("/api/create-repo", json=payload)

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert fake_github.requests == []


# ---------------------------
# upload
# ---------------------------

def test_upload_creates_file(client, fake_github, staging_dir):
    resp = client.post(
        "/api/upload",
        data=_form(path="site", relativePath="assets/logo.svg"),
        files={"file": ("logo.svg", b"<svg/>")},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body == {
        "success": True,
        "path": "site/assets/logo.svg",
        "url": "https://github.com/octocat/hello-world/blob/main/site/assets/logo.svg",
    }
    assert fake_github.content_of("site/assets/logo.svg") == b"<svg/>"
    assert fake_github.puts()[0]["json"]["message"] == "web upload"
    assert _staged(staging_dir) == []


def test_upload_updates_existing_file(client, fake_github):
    sha = fake_github.seed("notes.txt", b"old")

    resp = client.post("/api/upload", data=_form(), files={"file": ("notes.txt", b"new")})

    assert resp.json()["success"] is True
    assert fake_github.puts()[0]["json"]["sha"] == sha
    assert fake_github.content_of("notes.txt") == b"new"


def test_upload_defaults_branch_and_message(client, fake_github):
    client.post(
        "/api/upload",
        data=_form(branch="", message=""),
        files={"file": ("a.txt", b"x")},
    )

    sent = fake_github.puts()[0]["json"]
    assert sent["branch"] == "main"
    assert sent["message"] == "Upload file via GitHub Uploader"


def test_upload_failure_reports_error_and_cleans_staging(client, fake_github, staging_dir):
    fake_github.put_failures["a.txt"] = 500

    resp = client.post("/api/upload", data=_form(), files={"file": ("a.txt", b"x")})

    assert resp.json() == {"success": False, "error": "Server Error"}
    assert _staged(staging_dir) == []


def test_upload_without_file(client, fake_github):
    resp = client.post("/api/upload", data=_form())

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "No file provided"}
    assert fake_github.requests == []


def test_upload_without_configuration(client, fake_github, staging_dir):
    resp = client.post(
        "/api/upload",
        data=_form(token="", repoName=""),
        files={"file": ("a.txt", b"x")},
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "token" in body["error"] and "repo" in body["error"]
    assert fake_github.requests == []
    assert _staged(staging_dir) == []


def test_upload_large_file_is_staged_in_chunks(client, fake_github, staging_dir):
    # larger than one staging chunk, and not a multiple of it
    payload = bytes(range(256)) * (10 * 1024) + b"tail"

    resp = client.post("/api/upload", data=_form(), files={"file": ("big.bin", payload)})

    assert resp.json()["success"] is True
    assert fake_github.content_of("big.bin") == payload
    assert _staged(staging_dir) == []
