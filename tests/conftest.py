"""Shared fixtures: an in-memory transport that replays canned provider responses."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Union

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from risk_aggregation.providers import HttpRequest, HttpResponse, HttpTransport, TransportError


BASE_URL = "https://school.test/api/v1"


def envelope(data: Any, success: bool = True, **extra) -> Dict[str, Any]:
    """Build a provider envelope."""
    return {"success": success, "data": data, **extra}


class Route:
    """Canned behavior for one URL."""

    def __init__(self, body: Any = None, status: int = 200, delay: float = 0.0,
                 error: Union[Exception, None] = None, raw: Union[str, None] = None):
        self.body = body
        self.status = status
        self.delay = delay
        self.error = error
        self.raw = raw


class FakeTransport(HttpTransport):
    """Replays routes keyed by path (relative to BASE_URL) and records every request."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.requests: List[HttpRequest] = []
        self.completed: List[str] = []

    def path_of(self, url: str) -> str:
        return url[len(BASE_URL):].lstrip("/") if url.startswith(BASE_URL) else url

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        path = self.path_of(request.url)
        route = self.routes.get(path)
        if route is None:
            raise TransportError(f"connection refused: {path}")
        if route.delay:
            await asyncio.sleep(route.delay)
        if route.error is not None:
            raise route.error
        self.completed.append(path)
        body = route.raw if route.raw is not None else json.dumps(route.body)
        return HttpResponse(status=route.status, body=body)

    @property
    def called_paths(self) -> List[str]:
        return [self.path_of(r.url) for r in self.requests]


@pytest.fixture
def make_transport():
    """Factory fixture: ``make_transport({"path": Route(...)})``."""
    return FakeTransport


@pytest.fixture
def subject_entries():
    """Ten valid early-warning style entries."""
    return [
        {
            "studentId": 100 + i,
            "studentName": f"Student {i}",
            "matricule": f"MAT{i:03d}",
            "className": "Form 3",
            "subClassName": "Form 3B",
            "behaviorScore": 60 + i * 4,
            "totalIncidents": i % 4,
            "recentIncidents": i % 2,
        }
        for i in range(10)
    ]
