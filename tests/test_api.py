"""End-to-end tests through the HTTP and websocket surface"""

import time
import uuid
from unittest import mock

import redis
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from rendezvous import config, rate_limiter
from rendezvous.domain.realtime.registry import session_registry
from rendezvous.main import app

from .support import DatabaseTestCase, auth_headers, token_for


class ApiTestCase(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.client = TestClient(app)
        self.alice = self.make_party("Alice", age=29, bio="Climbing and coffee")
        self.bob = self.make_party("Bob", age=31)
        self.alice_headers = auth_headers(self.alice)
        self.bob_headers = auth_headers(self.bob)

    def like(self, headers, target):
        return self.client.post(f"/dating/users/{target.id}/like", headers=headers)

    def match(self):
        self.like(self.alice_headers, self.bob)
        self.like(self.bob_headers, self.alice)


class TestHealth(ApiTestCase):
    def test_root_and_health(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


class TestAuthentication(ApiTestCase):
    def assertUnauthenticated(self, response, code="unauthenticated"):
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"]["kind"], "unauthenticated")
        self.assertEqual(response.json()["error"]["code"], code)

    def test_missing_token(self):
        self.assertUnauthenticated(self.client.get("/dating/users"))

    def test_invalid_token(self):
        response = self.client.get("/dating/users", headers={"Authorization": "Bearer nope"})
        self.assertUnauthenticated(response)

    def test_expired_token(self):
        token = token_for(self.alice.id, exp=int(time.time()) - 60)
        response = self.client.get("/dating/users", headers={"Authorization": f"Bearer {token}"})
        self.assertUnauthenticated(response, code="token_expired")
        self.assertEqual(response.headers["X-Token-Expired"], "true")

    def test_unknown_party(self):
        headers = {"Authorization": f"Bearer {token_for(str(uuid.uuid4()))}"}
        self.assertUnauthenticated(self.client.get("/dating/users", headers=headers))


class TestRateLimitApi(ApiTestCase):
    def test_exceeded_limit_uses_error_envelope(self):
        with mock.patch.object(config, "RATE_LIMIT_ENABLED", True), mock.patch.object(
            rate_limiter, "get_redis_client", return_value=mock.Mock()
        ), mock.patch.object(rate_limiter, "check_rate_limit", return_value=(False, 121, 30)):
            response = self.client.post(f"/dating/users/{self.bob.id}/like", headers=self.alice_headers)

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.headers["Retry-After"], "30")
        error = response.json()["error"]
        self.assertEqual(error["kind"], "rate_limited")
        self.assertEqual(error["details"]["retry_after"], 30)

    def test_unavailable_redis_fails_closed(self):
        with mock.patch.object(config, "RATE_LIMIT_ENABLED", True), mock.patch.object(
            rate_limiter, "get_redis_client", side_effect=redis.ConnectionError("down")
        ):
            response = self.client.post(f"/dating/users/{self.bob.id}/like", headers=self.alice_headers)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["error"]["kind"], "service_unavailable")


class TestMatchingApi(ApiTestCase):
    def test_like_then_match(self):
        first = self.like(self.alice_headers, self.bob)
        self.assertEqual(first.status_code, 200)
        self.assertFalse(first.json()["matched"])

        liked_me = self.client.get("/dating/users/liked-me", headers=self.bob_headers).json()
        self.assertEqual([p["id"] for p in liked_me], [self.alice.id])

        second = self.like(self.bob_headers, self.alice)
        self.assertTrue(second.json()["matched"])

        for headers, other in ((self.alice_headers, self.bob), (self.bob_headers, self.alice)):
            matches = self.client.get("/dating/users/matches", headers=headers).json()
            self.assertEqual([p["id"] for p in matches], [other.id])

    def test_unlike_removes_match(self):
        self.match()
        response = self.client.delete(f"/dating/users/{self.bob.id}/like", headers=self.alice_headers)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["matchRemoved"])
        self.assertEqual(self.client.get("/dating/users/matches", headers=self.bob_headers).json(), [])

    def test_profile_flags(self):
        self.like(self.bob_headers, self.alice)
        profile = self.client.get(f"/dating/users/{self.bob.id}", headers=self.alice_headers).json()
        self.assertEqual(profile["name"], "Bob")
        self.assertFalse(profile["isLikedByMe"])
        self.assertTrue(profile["hasLikedMe"])
        self.assertFalse(profile["isMatch"])
        self.assertNotIn("likes", profile)
        self.assertNotIn("likedBy", profile)

    def test_list_profiles(self):
        profiles = self.client.get("/dating/users", headers=self.alice_headers).json()
        self.assertEqual([p["id"] for p in profiles], [self.bob.id])

    def test_error_shapes(self):
        response = self.like(self.alice_headers, self.alice)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["kind"], "self_reference")

        self.like(self.alice_headers, self.bob)
        response = self.like(self.alice_headers, self.bob)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"]["code"], "already_liked")

        response = self.client.post(f"/dating/users/{uuid.uuid4()}/like", headers=self.alice_headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["kind"], "invalid_reference")

        response = self.client.post("/dating/users/not-a-user/like", headers=self.alice_headers)
        self.assertEqual(response.status_code, 400)

        response = self.client.delete(f"/dating/users/{self.alice.id}/like", headers=self.bob_headers)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"]["code"], "not_liked")


class TestNotificationsApi(ApiTestCase):
    def test_notifications_newest_first(self):
        self.match()
        notifications = self.client.get("/dating/notifications", headers=self.bob_headers).json()
        self.assertEqual([n["kind"] for n in notifications], ["match", "like"])
        self.assertEqual(notifications[0]["sender"]["name"], "Alice")

        limited = self.client.get("/dating/notifications?limit=1", headers=self.bob_headers).json()
        self.assertEqual(len(limited), 1)

    def test_limit_out_of_range(self):
        response = self.client.get("/dating/notifications?limit=0", headers=self.bob_headers)
        self.assertEqual(response.status_code, 422)


class TestSchedulingApi(ApiTestCase):
    def submit(self, headers, counterpart, *slots):
        return self.client.post(
            "/dating/schedule/availability",
            headers=headers,
            json={
                "counterpartId": counterpart.id,
                "slots": [{"date": d, "start": s, "end": e} for d, s, e in slots],
            },
        )

    def test_scheduling_flow(self):
        self.match()

        first = self.submit(self.alice_headers, self.bob, ("2024-01-01", "10:00", "11:00"))
        self.assertEqual(first.status_code, 200)
        self.assertFalse(first.json()["matched"])

        second = self.submit(self.bob_headers, self.alice, ("2024-01-01", "10:20", "11:30")).json()
        self.assertTrue(second["matched"])
        self.assertEqual(second["commonSlot"], {"date": "2024-01-01", "start": "10:20", "end": "11:00"})

        status = self.client.get(f"/dating/schedule/status/{self.bob.id}", headers=self.alice_headers).json()
        self.assertEqual(status["type"], "pending_availability")
        self.assertTrue(status["partnerHasSubmitted"])

        confirmed = self.client.post(
            "/dating/schedule/confirm",
            headers=self.alice_headers,
            json={"counterpartId": self.bob.id, **second["commonSlot"]},
        )
        self.assertEqual(confirmed.status_code, 200)
        appointment = confirmed.json()["appointment"]
        self.assertEqual(appointment["status"], "scheduled")

        for headers in (self.alice_headers, self.bob_headers):
            listed = self.client.get("/dating/schedule/appointments", headers=headers).json()
            self.assertEqual([a["id"] for a in listed], [appointment["id"]])

        status = self.client.get(f"/dating/schedule/status/{self.alice.id}", headers=self.bob_headers).json()
        self.assertEqual(status["type"], "appointment")

        again = self.client.post(
            "/dating/schedule/confirm",
            headers=self.bob_headers,
            json={"counterpartId": self.alice.id, **second["commonSlot"]},
        )
        self.assertEqual(again.status_code, 409)
        self.assertEqual(again.json()["error"]["code"], "duplicate_confirmation")

    def test_requires_match(self):
        response = self.submit(self.alice_headers, self.bob, ("2024-01-01", "10:00", "11:00"))
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"]["code"], "not_matched")

    def test_invalid_slot(self):
        self.match()
        response = self.submit(self.alice_headers, self.bob, ("2024-01-01", "11:00", "10:00"))
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["kind"], "validation_error")

        response = self.submit(self.alice_headers, self.bob, ("2024-01-01", "25:00", "26:00"))
        self.assertEqual(response.status_code, 422)


class TestRealtime(ApiTestCase):
    def test_match_pushed_over_websocket(self):
        self.like(self.alice_headers, self.bob)

        with self.client.websocket_connect(f"/ws?token={token_for(self.alice.id)}") as websocket:
            self.assertIsNotNone(session_registry.lookup(self.alice.id))

            response = self.like(self.bob_headers, self.alice)
            self.assertTrue(response.json()["matched"])

            message = websocket.receive_json()
            self.assertEqual(message["event"], "receive_notification")
            self.assertEqual(message["data"]["kind"], "match")
            self.assertEqual(message["data"]["receiverId"], self.alice.id)
            self.assertEqual(message["data"]["sender"]["id"], self.bob.id)
            self.assertEqual(message["data"]["sender"]["name"], "Bob")

    def test_binary_frames_are_ignored(self):
        self.like(self.alice_headers, self.bob)

        with self.client.websocket_connect(f"/ws?token={token_for(self.alice.id)}") as websocket:
            websocket.send_bytes(b"\x00\x01")
            websocket.send_text("ping")

            self.like(self.bob_headers, self.alice)

            message = websocket.receive_json()
            self.assertEqual(message["data"]["kind"], "match")
            self.assertIsNotNone(session_registry.lookup(self.alice.id))

        self.assertIsNone(session_registry.lookup(self.alice.id))

    def test_rejects_bad_token(self):
        with self.assertRaises(WebSocketDisconnect):
            with self.client.websocket_connect("/ws?token=nope"):
                pass
        self.assertEqual(len(session_registry), 0)
