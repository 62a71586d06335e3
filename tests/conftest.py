import pytest
from app import create_app
from app.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Per-test database session with rollback."""
    with app.app_context():
        _db.session.begin_nested()
        yield _db
        _db.session.rollback()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Id": "42"}


@pytest.fixture
def make_product(client, admin_headers):
    """Create a product through the admin API and add the given options."""

    def _make(title="Test Tee", options=(), publish=False):
        resp = client.post("/admin/products", json={"title": title}, headers=admin_headers)
        assert resp.status_code == 201
        style_id = resp.get_json()["style_id"]
        for name, values in options:
            resp = client.post(
                f"/admin/products/{style_id}/options",
                json={"name": name, "values": list(values)},
                headers=admin_headers,
            )
            assert resp.status_code == 201, resp.get_json()
        if publish:
            resp = client.post(f"/admin/products/{style_id}/publish", headers=admin_headers)
            assert resp.status_code == 200
        return style_id

    return _make
