"""Tests for the async REST client, against an in-process mock transport."""

import asyncio
import json

import httpx

from milepost.infrastructure.http import RoadmapClient

API_URL = "http://milepost.test/api"


def run(client: RoadmapClient, action):
    async def scenario():
        try:
            return await action(client)
        finally:
            await client.close()

    return asyncio.run(scenario())


def test_load_returns_stored_tree(tree):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/roadmap"
        return httpx.Response(
            200, json={"roadmap": tree.to_json(), "lastModified": "2024-05-01T10:00:00.000Z"}
        )

    client = RoadmapClient(API_URL, transport=httpx.MockTransport(handler))
    root = run(client, lambda c: c.load())

    assert root.to_json() == tree.to_json()
    assert client.last_modified == "2024-05-01T10:00:00.000Z"


def test_load_falls_back_on_server_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "Failed to load roadmap data"})

    client = RoadmapClient(API_URL, default_title="Fallback", transport=httpx.MockTransport(handler))
    root = run(client, lambda c: c.load())

    assert root.id == "root"
    assert root.title == "Fallback"
    assert root.axes == []


def test_load_falls_back_when_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = RoadmapClient(API_URL, transport=httpx.MockTransport(handler))
    root = run(client, lambda c: c.load())

    assert root.axes == []


def test_load_falls_back_on_malformed_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    client = RoadmapClient(API_URL, transport=httpx.MockTransport(handler))

    assert run(client, lambda c: c.load()).id == "root"


def test_save_posts_whole_tree(tree):
    received = {}

    def handler(request: httpx.Request) -> httpx.Response:
        received.update(json.loads(request.content))
        return httpx.Response(
            200,
            json={"success": True, "data": {**received, "lastModified": "2024-05-02T08:00:00.000Z"}},
        )

    client = RoadmapClient(API_URL + "/", transport=httpx.MockTransport(handler))
    ok = run(client, lambda c: c.save(tree))

    assert ok is True
    assert received == {"roadmap": tree.to_json()}
    assert client.last_modified == "2024-05-02T08:00:00.000Z"


def test_save_reports_failure(tree):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "Failed to save roadmap data"})

    client = RoadmapClient(API_URL, transport=httpx.MockTransport(handler))

    assert run(client, lambda c: c.save(tree)) is False


def test_save_tolerates_reply_without_data(tree):
    replies = iter([{"success": True, "data": None}, ["unexpected"]])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=next(replies))

    client = RoadmapClient(API_URL, transport=httpx.MockTransport(handler))

    async def save_twice(c):
        return [await c.save(tree), await c.save(tree)]

    assert run(client, save_twice) == [True, True]
    assert client.last_modified is None
