import pytest

from fertilizer_ordering import create_app


def test_production_refuses_to_start_without_jwt_secret(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        create_app({"DISABLE_MONGO": True})


def test_production_uses_configured_jwt_secret(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", "prod-secret-key-with-at-least-32-bytes!")
    monkeypatch.delenv("OTP_IN_RESPONSE", raising=False)

    app = create_app({"DISABLE_MONGO": True})
    assert app.config["JWT_SECRET_KEY"] == "prod-secret-key-with-at-least-32-bytes!"
    assert app.config["OTP_IN_RESPONSE"] is False


def test_development_falls_back_to_dev_secret(monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    app = create_app({"DISABLE_MONGO": True})
    assert app.config["JWT_SECRET_KEY"] == "change-me"
