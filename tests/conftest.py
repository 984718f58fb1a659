# tests/conftest.py
# Test setup: in-memory fake backend + a WalletApi wired to it through TestClient.

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root on sys.path so "import wallet" works
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fake_api import create_backend  # noqa: E402  # pytest puts tests/ on sys.path
from wallet.config import Settings  # noqa: E402
from wallet.main import WalletApi  # noqa: E402


@pytest.fixture()
def backend():
    return create_backend()


@pytest.fixture()
def http(backend):
    # TestClient is an httpx.Client, so the real ApiClient code path runs
    with TestClient(backend, base_url="http://testserver/api") as c:
        yield c


@pytest.fixture()
def settings():
    return Settings(api_base="http://testserver/api", pay_period_days=15)


@pytest.fixture()
def api(settings, http):
    return WalletApi(settings=settings, http=http)


@pytest.fixture()
def signed_in(api):
    """Registered user with one savings account, one bank account and a category."""
    resp = api.auth.register(
        {"name": "Ana", "email": "ana@example.com", "password": "secret1"}
    )
    uid = resp.user.id
    savings = api.accounts.create(
        {"user_id": uid, "name": "Savings", "type": "savings"}
    ).id
    bank = api.accounts.create({"user_id": uid, "name": "Everyday", "type": "bank"}).id
    food = api.categories.create({"user_id": uid, "name": "Food", "kind": "expense"}).id
    return {"user_id": uid, "savings": savings, "bank": bank, "food": food}
