from __future__ import annotations

import pytest

from src.dayflow.dayflow.container import build_container
from src.dayflow.dayflow.core.enums import Role
from src.dayflow.dayflow.main import create_app

PASSWORD = "Str0ng!Pass"


class OutboxMailer:
    def __init__(self):
        self.outbox: list[tuple[str, str]] = []

    def send_otp(self, to, otp, *, ttl_minutes):
        self.outbox.append((to, otp))


@pytest.fixture
def mailer():
    return OutboxMailer()


@pytest.fixture
def container(storage, clock, mailer):
    return build_container(storage=storage, mailer=mailer, clock=clock)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def register_user(container, *, employee_id, email, role=Role.EMPLOYEE, first_name="Ana", last_name="Lopez"):
    return container.auth_service.sign_up(
        employee_id=employee_id,
        email=email,
        password=PASSWORD,
        confirm_password=PASSWORD,
        role=role,
        first_name=first_name,
        last_name=last_name,
        department="Engineering",
        position="Developer",
    )


@pytest.fixture
def employee_client(client, container):
    register_user(container, employee_id="EMP-001", email="ana@dayflow.io")
    resp = client.post("/api/auth/sign-in", json={"email": "ana@dayflow.io", "password": PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def hr_client(app, container):
    register_user(container, employee_id="HR-001", email="hana@dayflow.io", role=Role.HR, first_name="Hana", last_name="Ito")
    client = app.test_client()
    resp = client.post("/api/auth/sign-in", json={"email": "hana@dayflow.io", "password": PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def make_user(container):
    def _make(**kwargs):
        return register_user(container, **kwargs)

    return _make
