"""
Shared pytest fixtures for the portfolio site tests.
"""
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from portfolio.core.config import Settings
from portfolio.core.mailer import Mailer
from portfolio.core.rate_limit import limiter
from portfolio.main import create_app

INDEX_HTML = "<!DOCTYPE html><html><body><h1>Portfolio</h1></body></html>"


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Start each test with empty rate limit counters."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text(INDEX_HTML)
    (public / "app.js").write_text("console.log('portfolio');")
    return public


@pytest.fixture
def settings(static_dir) -> Settings:
    return Settings(
        _env_file=None,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="relay-user",
        smtp_pass="relay-pass",
        to_email="owner@example.com",
        from_email="site@example.com",
        static_dir=str(static_dir),
        cors_origins="*",
        strict_config=False,
    )


@pytest.fixture
def mailer(settings) -> Mailer:
    """A real Mailer whose network send is replaced by a mock."""
    mailer = Mailer(settings)
    mailer.send = AsyncMock(return_value=({}, "OK"))
    return mailer


@pytest.fixture
def app(settings, mailer):
    return create_app(settings, mailer=mailer)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def valid_submission():
    return {"name": "Jane", "email": "jane@x.com", "message": "Hi"}
