import pytest


@pytest.fixture
def dist(app, tmp_path):
    (tmp_path / "index.html").write_text("<html>spa</html>")
    (tmp_path / "app.js").write_text("console.log('hi')")
    app.config["FRONTEND_DIST"] = str(tmp_path)
    return tmp_path


def test_frontend_disabled_by_default(client):
    res = client.get("/")
    assert res.status_code == 404
    assert "message" in res.get_json()


def test_frontend_serves_assets_and_falls_back_to_index(client, dist):
    assert client.get("/app.js").data == b"console.log('hi')"
    assert client.get("/").data == b"<html>spa</html>"
    assert client.get("/orders/123").data == b"<html>spa</html>"


def test_unknown_api_path_stays_json_404(client, dist):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.get_json()["message"]
