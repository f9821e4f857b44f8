"""
Unit Tests for Rate Limiting
Tests for: middleware wiring, limiter key
"""
from starlette.requests import Request

from app.main import app
from app.core.rate_limiter import SlowAPIMiddleware, get_user_identifier


def make_request(user_id=None):
    request = Request({
        "type": "http",
        "method": "GET",
        "path": "/api/projects",
        "headers": [],
        "client": ("10.0.0.7", 5000),
    })
    if user_id:
        request.state.user_id = user_id
    return request


class TestDefaultLimit:

    def test_middleware_installed(self):
        assert any(m.cls is SlowAPIMiddleware for m in app.user_middleware)


class TestLimiterKey:

    def test_anonymous_uses_ip(self):
        assert get_user_identifier(make_request()) == "ip:10.0.0.7"

    def test_authenticated_uses_user(self):
        assert get_user_identifier(make_request("user-123")) == "user:user-123"
