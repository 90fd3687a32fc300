import os
import sys
import tempfile
from pathlib import Path

# Configure before anything imports stockroom.config
_test_tmp_dir = tempfile.mkdtemp(prefix="stockroom_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_tmp_dir, 'test.db')}"
os.environ["DEBUG"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-do-not-use-in-production"
os.environ["SMTP_HOST"] = ""
os.environ["APP_BASE_URL"] = "http://testserver"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stockroom.database import Base, SessionLocal, engine  # noqa: E402
from stockroom.exceptions import MailDeliveryError  # noqa: E402
from stockroom.main import app  # noqa: E402
from stockroom.services.mailer import Mailer, get_mailer  # noqa: E402
from stockroom.utils.session_store import session_store  # noqa: E402


class RecordingMailer(Mailer):
    """Mailer that keeps messages in memory instead of sending them."""

    def __init__(self):
        super().__init__(smtp_host=None)
        self.sent = []
        self.fail = False

    def send(self, to, subject, html, text=None, preview=None):
        if self.fail:
            raise MailDeliveryError()
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text, "preview": preview})
        return None


@pytest.fixture(autouse=True)
def reset_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session_store.clear()
    yield
    app.dependency_overrides.clear()
    session_store.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mailer():
    recorder = RecordingMailer()
    app.dependency_overrides[get_mailer] = lambda: recorder
    return recorder


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_client():
    """Independent clients, each with its own cookie jar."""
    def _make():
        return TestClient(app)
    return _make


def register(client, name="Alice", email="alice@example.com", password="p1-secret", role="Assistant"):
    return client.post(
        "/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )


def login(client, email="alice@example.com", password="p1-secret"):
    return client.post("/login", json={"email": email, "password": password})


def signed_in(client, role="Assistant", email=None, password="p1-secret", name=None):
    """Register and log in; returns the session user as reported by /current-user."""
    email = email or f"{role.lower()}@example.com"
    register(client, name=name or role, email=email, password=password, role=role)
    assert login(client, email=email, password=password).status_code == 200
    return client.get("/current-user").json()["user"]
