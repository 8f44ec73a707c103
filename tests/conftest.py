"""
Pytest configuration for feedback portal tests.
Storage is an in-memory stand-in for the Supabase REST API.
"""

import os

# Settings are read at import time - must be set before any imports
os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.pop("REDIS_URL", None)

import json
import uuid
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from feedback_portal.db import SupabaseClient
from feedback_portal.feedback import service
from feedback_portal.main import app


class FakeFeedbackStore:
    """Understands the subset of PostgREST the service uses: eq filters, order, insert."""

    def __init__(self):
        self.rows: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.fail = False

    def seed(self, name, category="other", timestamp=None, email=None, feedback="Some feedback"):
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "email": email or f"{name.lower()}@example.com",
            "feedback": feedback,
            "category": category,
            "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        }
        self.rows.append(row)
        return row

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(503, json={"message": "storage unavailable"})

        if request.method == "POST":
            created = []
            for item in json.loads(request.content):
                row = {"id": str(uuid.uuid4()), **item}
                self.rows.append(row)
                created.append(row)
            return httpx.Response(201, json=created)

        rows = list(self.rows)
        for key, value in request.url.params.items():
            if key != "order" and value.startswith("eq."):
                rows = [r for r in rows if r.get(key) == value[3:]]

        order = request.url.params.get("order")
        if order:
            field, _, direction = order.partition(".")
            if field == "timestamp":
                sort_key = lambda r: datetime.fromisoformat(r["timestamp"])
            else:
                sort_key = lambda r: r[field]
            rows.sort(key=sort_key, reverse=direction == "desc")

        return httpx.Response(200, json=rows)


@pytest.fixture
def store(monkeypatch):
    fake = FakeFeedbackStore()
    client = SupabaseClient(
        api_url="http://supabase.test/rest/v1",
        transport=httpx.MockTransport(fake.handle),
    )
    monkeypatch.setattr(service, "supabase_client", client)
    return fake


@pytest.fixture
def client(store):
    with TestClient(app) as test_client:
        yield test_client
