"""
HTTP tests for hiring posts, applications and notifications.
"""
import asyncio
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from hireflow.api.dependencies import get_post_service, get_application_service, get_notification_service
from hireflow.core.auth import get_current_hr, get_current_candidate, get_current_user, get_user_service
from hireflow.main import app
from hireflow.services.notification_service import NotificationDispatcher, InAppNotificationChannel
from hireflow.services.status_service import ApplicationStatusService, get_status_service

from conftest import RecordingChannel


@pytest.fixture
def client(users, posts, applications, notifications, channel, hr_caller):
    app.dependency_overrides[get_user_service] = lambda: users
    app.dependency_overrides[get_post_service] = lambda: posts
    app.dependency_overrides[get_application_service] = lambda: applications
    app.dependency_overrides[get_notification_service] = lambda: notifications
    app.dependency_overrides[get_status_service] = lambda: ApplicationStatusService(
        applications, posts, users, NotificationDispatcher(channel)
    )
    app.dependency_overrides[get_current_hr] = lambda: hr_caller
    yield TestClient(app)
    app.dependency_overrides.clear()


def act_as_candidate(caller):
    app.dependency_overrides[get_current_candidate] = lambda: caller
    app.dependency_overrides[get_current_user] = lambda: caller


class TestStatusEndpoint:

    def test_shortlist(self, client, application, channel):
        response = client.put(f"/api/applications/{application['id']}/status", json={"status": "shortlisted"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "shortlisted"
        assert body["notified"] is True
        assert "invitation" in body["message"].lower()
        assert len(channel.sent) == 1

    def test_repeat_reports_unchanged(self, client, application, channel):
        url = f"/api/applications/{application['id']}/status"
        client.put(url, json={"status": "shortlisted"})

        response = client.put(url, json={"status": "shortlisted"})

        assert response.status_code == 200
        assert response.json()["notified"] is False
        assert response.json()["message"] == "Status unchanged"
        assert len(channel.sent) == 1

    def test_reviewed_needs_no_notification(self, client, application, channel):
        response = client.put(f"/api/applications/{application['id']}/status", json={"status": "reviewed"})

        assert response.status_code == 200
        assert response.json()["notified"] is False
        assert channel.sent == []

    def test_denormalized_payload(self, client, application, channel):
        response = client.put(
            f"/api/applications/{application['id']}/status",
            json={
                "status": "rejected",
                "candidateEmail": "jane@x.com",
                "candidateName": "Jane",
                "jobTitle": "Backend Engineer",
                "companyName": "Acme",
                "hrName": "Priya",
            },
        )

        assert response.status_code == 200
        assert channel.sent[0].template == "regret"
        assert "Priya" in channel.sent[0].body

    def test_unknown_id_is_404(self, client, channel):
        response = client.put("/api/applications/65f000000000000000000000/status", json={"status": "rejected"})

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert channel.sent == []

    def test_missing_body_is_400(self, client, application):
        response = client.put(f"/api/applications/{application['id']}/status")

        assert response.status_code == 400

    def test_invalid_status_is_400(self, client, application, applications):
        response = client.put(f"/api/applications/{application['id']}/status", json={"status": "hired"})

        assert response.status_code == 400
        assert applications.get_by_id(application["id"])["status"] == "pending"

    def test_dispatch_failure_is_500(self, client, users, posts, applications, application):
        app.dependency_overrides[get_status_service] = lambda: ApplicationStatusService(
            applications, posts, users, NotificationDispatcher(RecordingChannel(fail=True))
        )

        response = client.put(f"/api/applications/{application['id']}/status", json={"status": "shortlisted"})

        assert response.status_code == 500
        assert response.json()["success"] is False
        # Status write is not rolled back
        assert applications.get_by_id(application["id"])["status"] == "shortlisted"

    def test_in_app_channel_creates_candidate_notification(
        self, client, users, posts, applications, notifications, application, candidate_caller
    ):
        app.dependency_overrides[get_status_service] = lambda: ApplicationStatusService(
            applications, posts, users, NotificationDispatcher(InAppNotificationChannel(notifications))
        )
        client.put(f"/api/applications/{application['id']}/status", json={"status": "shortlisted"})

        act_as_candidate(candidate_caller)
        response = client.get("/api/notifications")

        assert response.status_code == 200
        body = response.json()
        assert body["unreadCount"] == 1
        assert body["notifications"][0]["type"] == "INTERVIEW"

        notification_id = body["notifications"][0]["id"]
        assert client.put(f"/api/notifications/{notification_id}/read").status_code == 200
        assert client.get("/api/notifications").json()["unreadCount"] == 0


class TestApplicationFlow:

    def test_candidate_applies(self, client, post, candidate_caller):
        act_as_candidate(candidate_caller)

        response = client.post(
            "/api/applications",
            json={"postId": post["id"], "resumeUrl": "http://localhost:8000/uploads/1-cv.pdf"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["jobTitle"] == "Backend Engineer"
        assert body["candidateEmail"] == "jane@x.com"
        assert body["hrId"] == post["hrId"]

    def test_duplicate_application_is_400(self, client, post, application, candidate_caller):
        act_as_candidate(candidate_caller)

        response = client.post(
            "/api/applications",
            json={"postId": post["id"], "resumeUrl": "http://localhost:8000/uploads/2-cv.pdf"},
        )

        assert response.status_code == 400

    def test_apply_to_unknown_post_is_404(self, client, candidate_caller):
        act_as_candidate(candidate_caller)

        response = client.post(
            "/api/applications",
            json={"postId": "65f000000000000000000000", "resumeUrl": "http://x/cv.pdf"},
        )

        assert response.status_code == 404

    def test_hr_lists_received_applications(self, client, application):
        response = client.get("/api/applications")

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [application["id"]]

        filtered = client.get("/api/applications", params={"status": "shortlisted"})
        assert filtered.json() == []

    def test_candidate_lists_own_applications(self, client, application, candidate_caller):
        act_as_candidate(candidate_caller)

        response = client.get("/api/applications/mine")

        assert response.status_code == 200
        assert response.json()[0]["id"] == application["id"]


class TestHiringPosts:

    def test_create_post_uses_company_name(self, client, hr_user):
        response = client.post(
            "/api/posts",
            json={
                "title": "Data Analyst",
                "description": "SQL all day",
                "location": "Pune",
                "jobType": "full-time",
                "requirements": ["SQL"],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["companyName"] == "Acme"
        assert body["status"] == "active"
        assert body["hrId"] == hr_user["id"]

    def test_list_active_and_mine(self, client, post):
        assert [p["id"] for p in client.get("/api/posts").json()] == [post["id"]]
        assert [p["id"] for p in client.get("/api/posts/mine").json()] == [post["id"]]

    def test_delete_post_removes_applications(self, client, post, application, applications):
        response = client.delete(f"/api/posts/{post['id']}")

        assert response.status_code == 200
        assert applications.get_by_id(application["id"]) is None
        assert client.get(f"/api/posts/{post['id']}").status_code == 404


class TestStatusEndpointFailures:

    def test_storage_failure_is_500(self, client, applications, application, channel):
        applications.collection.fail_on.add("update_one")

        response = client.put(f"/api/applications/{application['id']}/status", json={"status": "shortlisted"})

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert channel.sent == []


class SlowChannel(RecordingChannel):
    """Holds each send for a fixed delay, like a slow email provider."""

    delay = 0.5

    def send(self, message):
        time.sleep(self.delay)
        super().send(message)


class TestConcurrentStatusUpdates:

    def test_slow_dispatch_does_not_block_other_requests(
        self, client, users, posts, applications, application, post
    ):
        other_candidate = users.create(email="sam@x.com", password_hash="x", name="Sam Lee", role="candidate")
        other_application = applications.create(other_candidate, post, "http://localhost:8000/uploads/2-cv.pdf")
        slow = SlowChannel()
        app.dependency_overrides[get_status_service] = lambda: ApplicationStatusService(
            applications, posts, users, NotificationDispatcher(slow)
        )

        async def update_both():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
                return await asyncio.gather(
                    http.put(f"/api/applications/{application['id']}/status", json={"status": "shortlisted"}),
                    http.put(f"/api/applications/{other_application['id']}/status", json={"status": "rejected"}),
                )

        started = time.perf_counter()
        responses = asyncio.run(update_both())
        elapsed = time.perf_counter() - started

        assert [r.status_code for r in responses] == [200, 200]
        assert len(slow.sent) == 2
        # Both sends overlap instead of running back to back
        assert elapsed < 2 * SlowChannel.delay * 0.9
