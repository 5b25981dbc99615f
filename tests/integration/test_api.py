"""HTTP tests for the ideas and supervision endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from src.sparkhub.core.notifications import NotificationEvent, drain_notifications
from tests.helpers import auth_headers, create_access_token, idea_fields

pytestmark = pytest.mark.integration


async def _create_idea(client: AsyncClient, user, **overrides) -> dict:
    response = await client.post(
        "/api/v1/ideas", json=idea_fields(**overrides), headers=auth_headers(user.id)
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _request_supervision(client: AsyncClient, owner, supervisor, **body) -> dict:
    response = await client.post(
        "/api/v1/supervision-requests",
        json={"supervisor_id": str(supervisor.id), **body},
        headers=auth_headers(owner.id),
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthentication:
    async def test_missing_token(self, client):
        response = await client.get("/api/v1/ideas/me")
        assert response.status_code == 401
        assert response.json()["request_id"]

    async def test_expired_token(self, client, owner):
        token = create_access_token(owner.id, expires_minutes=-1)
        response = await client.get(
            "/api/v1/ideas/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    async def test_refresh_token_rejected(self, client, owner):
        token = create_access_token(owner.id, type="refresh")
        response = await client.get(
            "/api/v1/ideas/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token type"

    async def test_unknown_user(self, client):
        response = await client.get("/api/v1/ideas/me", headers=auth_headers(uuid4()))
        assert response.status_code == 401

    async def test_non_uuid_subject(self, client):
        response = await client.get("/api/v1/ideas/me", headers=auth_headers("not-a-uuid"))
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid user_id in token"


class TestIdeas:
    async def test_create_and_read(self, client, owner):
        created = await _create_idea(client, owner)
        assert created["status"] == "draft"
        assert created["owner_id"] == str(owner.id)
        assert created["supervisor_id"] is None

        response = await client.get("/api/v1/ideas/me", headers=auth_headers(owner.id))
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    async def test_business_model_defaults(self, client, owner):
        fields = idea_fields()
        del fields["business_model"]
        response = await client.post("/api/v1/ideas", json=fields, headers=auth_headers(owner.id))
        assert response.status_code == 201
        assert response.json()["business_model"] == "Not Sure Yet"

    async def test_create_twice_conflict(self, client, owner):
        await _create_idea(client, owner)
        response = await client.post(
            "/api/v1/ideas", json=idea_fields(), headers=auth_headers(owner.id)
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "already_exists"

    async def test_create_invalid_fields(self, client, owner):
        response = await client.post(
            "/api/v1/ideas",
            json=idea_fields(title="x" * 101, category="Gardening"),
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 422
        body = response.json()
        assert body["kind"] == "validation_error"
        assert set(body["errors"]) == {"title", "category"}

    async def test_create_rejects_status_field(self, client, owner):
        response = await client.post(
            "/api/v1/ideas",
            json={**idea_fields(), "status": "public"},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 422
        assert "status" in response.json()["errors"]

    async def test_missing_idea(self, client, owner):
        response = await client.get("/api/v1/ideas/me", headers=auth_headers(owner.id))
        assert response.status_code == 404
        assert response.json()["detail"] == "You have not created an idea yet"

    async def test_draft_hidden_from_others(self, client, owner, stranger):
        created = await _create_idea(client, owner)
        response = await client.get(
            f"/api/v1/ideas/{created['id']}", headers=auth_headers(stranger.id)
        )
        assert response.status_code == 404

    async def test_patch_content(self, client, owner):
        created = await _create_idea(client, owner)
        response = await client.patch(
            f"/api/v1/ideas/{created['id']}",
            json={"target_market": "Hikers"},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 200
        assert response.json()["target_market"] == "Hikers"
        assert response.json()["title"] == created["title"]

    async def test_patch_by_stranger_forbidden(self, client, owner, stranger):
        created = await _create_idea(client, owner)
        response = await client.patch(
            f"/api/v1/ideas/{created['id']}",
            json={"title": "Taken"},
            headers=auth_headers(stranger.id),
        )
        assert response.status_code == 403
        assert response.json()["kind"] == "forbidden"

    async def test_delete(self, client, owner):
        created = await _create_idea(client, owner)
        response = await client.delete(
            f"/api/v1/ideas/{created['id']}", headers=auth_headers(owner.id)
        )
        assert response.status_code == 204

        again = await client.delete(
            f"/api/v1/ideas/{created['id']}", headers=auth_headers(owner.id)
        )
        assert again.status_code == 404


class TestSupervisionFlow:
    async def test_request_accept_publishes_idea(
        self, client, owner, supervisor, stranger, recording_sink
    ):
        idea = await _create_idea(client, owner)
        request = await _request_supervision(client, owner, supervisor, message="Please review")
        assert request["status"] == "pending"

        inbox = await client.get(
            "/api/v1/supervision-requests/inbox", headers=auth_headers(supervisor.id)
        )
        assert [r["id"] for r in inbox.json()["items"]] == [request["id"]]

        # The requested supervisor may read the idea while it is under review
        preview = await client.get(
            f"/api/v1/ideas/{idea['id']}", headers=auth_headers(supervisor.id)
        )
        assert preview.json()["status"] == "pending_review"

        response = await client.post(
            f"/api/v1/supervision-requests/{request['id']}/respond",
            json={"decision": "accept", "response_message": "Welcome aboard"},
            headers=auth_headers(supervisor.id),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert response.json()["decided_at"] is not None

        feed = await client.get("/api/v1/ideas", headers=auth_headers(stranger.id))
        items = feed.json()["items"]
        assert [i["id"] for i in items] == [idea["id"]]
        assert items[0]["supervisor_id"] == str(supervisor.id)

        await drain_notifications(1.0)
        assert recording_sink.events_for(supervisor.id) == [
            NotificationEvent.SUPERVISION_REQUESTED
        ]
        assert recording_sink.events_for(owner.id) == [NotificationEvent.REQUEST_ACCEPTED]

    async def test_duplicate_request_conflict(self, client, owner, supervisor, other_supervisor):
        await _create_idea(client, owner)
        await _request_supervision(client, owner, supervisor)

        response = await client.post(
            "/api/v1/supervision-requests",
            json={"supervisor_id": str(other_supervisor.id)},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 409
        assert response.json() == {
            "kind": "duplicate_pending",
            "detail": "You already have a pending request",
            "request_id": response.headers["X-Request-ID"],
        }

    async def test_request_without_idea(self, client, owner, supervisor):
        response = await client.post(
            "/api/v1/supervision-requests",
            json={"supervisor_id": str(supervisor.id)},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 404

    async def test_self_supervision(self, client, owner):
        await _create_idea(client, owner)
        response = await client.post(
            "/api/v1/supervision-requests",
            json={"supervisor_id": str(owner.id)},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 422
        assert response.json()["errors"] == {
            "supervisor_id": "You cannot supervise your own idea"
        }

    async def test_respond_by_other_supervisor(
        self, client, owner, supervisor, other_supervisor
    ):
        await _create_idea(client, owner)
        request = await _request_supervision(client, owner, supervisor)

        response = await client.post(
            f"/api/v1/supervision-requests/{request['id']}/respond",
            json={"decision": "accept"},
            headers=auth_headers(other_supervisor.id),
        )
        assert response.status_code == 403

    async def test_respond_invalid_decision(self, client, owner, supervisor):
        await _create_idea(client, owner)
        request = await _request_supervision(client, owner, supervisor)

        response = await client.post(
            f"/api/v1/supervision-requests/{request['id']}/respond",
            json={"decision": "maybe"},
            headers=auth_headers(supervisor.id),
        )
        assert response.status_code == 422
        assert "decision" in response.json()["errors"]

    async def test_cancel_then_cancel_again(self, client, owner, supervisor):
        await _create_idea(client, owner)
        request = await _request_supervision(client, owner, supervisor)
        url = f"/api/v1/supervision-requests/{request['id']}/cancel"

        first = await client.post(url, headers=auth_headers(owner.id))
        assert first.status_code == 200
        assert first.json() == {"message": "Supervision request cancelled"}

        second = await client.post(url, headers=auth_headers(owner.id))
        assert second.status_code == 409
        assert second.json()["kind"] == "invalid_state"

        mine = await client.get(
            "/api/v1/supervision-requests/mine", headers=auth_headers(owner.id)
        )
        assert [r["status"] for r in mine.json()["items"]] == ["cancelled"]

        me = await client.get("/api/v1/ideas/me", headers=auth_headers(owner.id))
        assert me.json()["status"] == "draft"

    async def test_delete_pending_idea_then_respond(self, client, owner, supervisor):
        idea = await _create_idea(client, owner)
        request = await _request_supervision(client, owner, supervisor)

        deleted = await client.delete(
            f"/api/v1/ideas/{idea['id']}", headers=auth_headers(owner.id)
        )
        assert deleted.status_code == 204

        response = await client.post(
            f"/api/v1/supervision-requests/{request['id']}/respond",
            json={"decision": "accept"},
            headers=auth_headers(supervisor.id),
        )
        assert response.status_code == 409

    async def test_inbox_forbidden_for_regular_user(self, client, stranger):
        response = await client.get(
            "/api/v1/supervision-requests/inbox", headers=auth_headers(stranger.id)
        )
        assert response.status_code == 403

    async def test_supervisor_directory(self, client, owner, supervisor, other_supervisor):
        response = await client.get("/api/v1/supervisors", headers=auth_headers(owner.id))
        assert response.status_code == 200
        assert [s["full_name"] for s in response.json()] == ["Sam Supervisor", "Yara Supervisor"]
        assert "email" not in response.json()[0]
