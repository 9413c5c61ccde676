"""
Tests for JWT auth routes and the upload pass-through.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from hireflow.core.auth import create_access_token, decode_token, get_user_service
from hireflow.core.config import Settings
from hireflow.main import app
from hireflow.services.status_service import get_status_service
from hireflow.utils import file_upload


@pytest.fixture
def client(users):
    app.dependency_overrides[get_user_service] = lambda: users
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestTokens:

    def test_round_trip(self):
        token = create_access_token({"sub": "abc", "role": "HR"})
        payload = decode_token(token)

        assert payload["sub"] == "abc"
        assert payload["role"] == "HR"

    def test_tampered_token(self):
        token = create_access_token({"sub": "abc"})

        assert decode_token(token + "x") is None


class TestAuthRoutes:

    def test_register_login_me(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "sam@x.com", "password": "s3cret-pass", "name": "Sam Lee"},
        )
        assert response.status_code == 201

        login = client.post("/api/auth/login", json={"email": "sam@x.com", "password": "s3cret-pass"})
        assert login.status_code == 200
        token = login.json()["accessToken"]
        assert login.json()["role"] == "candidate"

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "sam@x.com"
        assert me.json()["totalInterviews"] == 0

    def test_register_hr_and_update_profile(self, client):
        client.post(
            "/api/auth/register/hr",
            json={
                "email": "priya@acme.com",
                "password": "s3cret-pass",
                "name": "Priya Shah",
                "companyName": "Acme",
                "companySize": "51-200",
                "hrRole": "Talent Lead",
            },
        )
        token = client.post(
            "/api/auth/login", json={"email": "priya@acme.com", "password": "s3cret-pass"}
        ).json()["accessToken"]

        response = client.put(
            "/api/auth/me",
            json={"location": "Pune", "companyWebsite": "https://acme.example"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert response.json()["role"] == "HR"
        assert response.json()["companyName"] == "Acme"
        assert response.json()["location"] == "Pune"
        assert response.json()["companyWebsite"] == "https://acme.example"

    def test_duplicate_email(self, client):
        body = {"email": "sam@x.com", "password": "s3cret-pass", "name": "Sam Lee"}
        client.post("/api/auth/register", json=body)

        response = client.post("/api/auth/register", json=body)

        assert response.status_code == 400

    def test_wrong_password(self, client):
        client.post("/api/auth/register", json={"email": "sam@x.com", "password": "s3cret-pass", "name": "Sam"})

        response = client.post("/api/auth/login", json={"email": "sam@x.com", "password": "nope-nope"})

        assert response.status_code == 401

    def test_candidate_cannot_update_status(self, client, status_service):
        app.dependency_overrides[get_status_service] = lambda: status_service
        client.post("/api/auth/register", json={"email": "sam@x.com", "password": "s3cret-pass", "name": "Sam"})
        token = client.post(
            "/api/auth/login", json={"email": "sam@x.com", "password": "s3cret-pass"}
        ).json()["accessToken"]

        response = client.put(
            "/api/applications/65f000000000000000000000/status",
            json={"status": "shortlisted"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 403

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code in (401, 403)


class TestUpload:

    @pytest.fixture(autouse=True)
    def upload_settings(self, tmp_path, monkeypatch):
        settings = Settings(upload_dir=str(tmp_path), public_base_url="http://files.test/", max_upload_mb=1)
        monkeypatch.setattr(file_upload, "get_settings", lambda: settings)
        return settings

    def test_upload_returns_public_url(self, client, tmp_path):
        response = client.post("/api/upload", files={"image": ("my photo.png", b"\x89PNG data", "image/png")})

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("http://files.test/uploads/")
        assert url.endswith("-my_photo.png")

        stored = tmp_path / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == b"\x89PNG data"

    def test_missing_file(self, client):
        response = client.post("/api/upload")

        assert response.status_code == 400

    def test_too_large(self, client):
        response = client.post("/api/upload", files={"image": ("big.bin", b"x" * (1024 * 1024 + 1))})

        assert response.status_code == 413

    def test_path_components_are_stripped(self):
        assert file_upload.safe_filename("../../etc/passwd") == "passwd"
        assert Path(file_upload.safe_filename("résumé final.pdf")).suffix == ".pdf"


class TestResumeText:

    def test_txt_extraction(self):
        assert file_upload.extract_from_txt("Jane Doe\nPython".encode("utf-8")) == "Jane Doe\nPython"

    def test_unsupported_extension(self, client, candidate_caller):
        from hireflow.core.auth import get_current_user

        app.dependency_overrides[get_current_user] = lambda: candidate_caller
        response = client.post("/api/interviews/resume-text", files={"file": ("cv.png", b"data")})

        assert response.status_code == 400

    def test_resume_text_endpoint(self, client, candidate_caller):
        from hireflow.core.auth import get_current_user

        app.dependency_overrides[get_current_user] = lambda: candidate_caller
        response = client.post("/api/interviews/resume-text", files={"file": ("cv.txt", b"Jane Doe - Python, SQL")})

        assert response.status_code == 200
        assert response.json()["resumeContent"] == "Jane Doe - Python, SQL"
        assert response.json()["filename"] == "cv.txt"
