import pytest

from app import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "JWT_SECRET": "test-jwt",
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{(tmp_path / 'test.db').as_posix()}",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "STORAGE_PATH": str(tmp_path / "local_storage.json"),
        "LOG_DIR": str(tmp_path / "logs"),
        "STRAPI_BASE_URL": "https://cms.example.com",
        "SMTP_HOST": None,
        "SMTP_USER": None,
        "SMTP_PASS": None,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email, password="secret"):
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.get_json()
        return r.get_json()["user"]
    return _login


@pytest.fixture
def admin(client):
    r = client.post("/api/auth/login", json={"email": "isabelle@chiefmedia.sg", "password": "admin123"})
    assert r.status_code == 200
    return r.get_json()["user"]


@pytest.fixture
def realtor(login):
    return login("agent@kwsingapore.com")


@pytest.fixture
def vendor(client):
    r = client.post("/api/auth/signup", json={
        "email": "snap@studio.sg", "name": "Snap Studio", "role": "vendor", "password": "pw",
    })
    assert r.status_code == 201
    return r.get_json()["user"]
