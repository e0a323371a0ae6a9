"""
MessageWall Backend - Middleware Tests
========================================

What we test:
    ✅ Requests are classified as list / create / like, with the like target id
    ✅ Client request IDs are kept only when they are plain tokens
    ✅ The access log line carries the operation and message id
"""

import logging

import pytest

from app.middleware.logging import classify_request
from app.middleware.request_id import resolve_request_id


class TestClassifyRequest:

    @pytest.mark.parametrize(
        "method, path, expected",
        [
            ("GET", "/api/messages", ("list", None)),
            ("POST", "/api/messages", ("create", None)),
            ("POST", "/api/messages/abc-123/like", ("like", "abc-123")),
            ("GET", "/api/messages/abc-123/like", ("other", None)),
            ("GET", "/docs", ("other", None)),
        ],
    )
    def test_operations(self, method, path, expected):
        assert classify_request(method, path) == expected


class TestResolveRequestId:

    def test_plain_token_kept(self):
        assert resolve_request_id("req-1.a_B") == "req-1.a_B"

    @pytest.mark.parametrize("supplied", [None, "", "a b", "x\nforged line", "y" * 65])
    def test_unsafe_or_missing_replaced(self, supplied):
        rid = resolve_request_id(supplied)

        assert rid != supplied
        assert len(rid) == 8


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_like_logged_with_message_id(self, test_client, caplog):
        created = (await test_client.post("/api/messages", json={"content": "hi"})).json()["data"]

        with caplog.at_level(logging.INFO, logger="messagewall.access"):
            await test_client.post(
                f"/api/messages/{created['id']}/like",
                json={"action": "add"},
                headers={"X-Request-ID": "like-1"},
            )

        records = [r for r in caplog.records if r.name == "messagewall.access"]
        assert len(records) == 1
        record = records[0]
        assert record.operation == "like"
        assert record.message_id == created["id"]
        assert record.request_id == "like-1"
        assert record.status == 200

    @pytest.mark.asyncio
    async def test_unsafe_request_id_not_echoed(self, test_client):
        response = await test_client.get(
            "/api/messages", headers={"X-Request-ID": "bad id with spaces"}
        )

        assert response.headers["X-Request-ID"] != "bad id with spaces"
