from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from fertilizer_ordering import create_app
from fertilizer_ordering.mongo import ensure_indexes, mongo

ADMIN_PHONE = "25078815000"
ADMIN_OTP = "0001"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "APP_ENV": "test",
        "DISABLE_MONGO": True,
        "JWT_SECRET_KEY": "test-secret-key-with-at-least-32-bytes!!",
        "BCRYPT_LOG_ROUNDS": 4,
        "ADMIN_PHONE": ADMIN_PHONE,
        "ADMIN_OTP": ADMIN_OTP,
        "OTP_IN_RESPONSE": True,
    })

    mongo.cx = mongomock.MongoClient(tz_aware=True)
    mongo.db = mongo.cx["farmer_ordering_test"]
    ensure_indexes(mongo.db)

    yield app

    mongo.cx = None
    mongo.db = None


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return mongo.db


class FrozenClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock(monkeypatch):
    c = FrozenClock(datetime(2026, 3, 1, 8, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr("fertilizer_ordering.services.otp_service.utcnow", c)
    monkeypatch.setattr("fertilizer_ordering.services.user_service.utcnow", c)
    return c


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    def _register(phone="0788000111", name="Jane Farmer", land_area=2.5, **extra):
        body = {"phoneNumber": phone, "fullName": name, "landArea": land_area, **extra}
        return client.post("/api/auth/register-farmer", json=body)
    return _register


@pytest.fixture
def farmer(register):
    res = register()
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture
def admin_token(client):
    res = client.post("/api/auth/admin-login", json={"phoneNumber": ADMIN_PHONE, "otp": ADMIN_OTP})
    assert res.status_code == 200
    return res.get_json()["token"]


@pytest.fixture
def add_fertilizer(client, admin_token):
    def _add(name="Urea", rate=40, **extra):
        res = client.post(
            "/api/admin/fertilizers",
            json={"name": name, "ratePerHectare": rate, **extra},
            headers=bearer(admin_token),
        )
        assert res.status_code == 201, res.get_json()
        return res.get_json()["fertilizer"]
    return _add
