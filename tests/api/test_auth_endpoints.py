from __future__ import annotations

from datetime import datetime, timedelta

PASSWORD = "Str0ng!Pass"


def _sign_up_body(**overrides):
    body = {
        "employeeId": "EMP-010",
        "email": "dan@dayflow.io",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
        "firstName": "Dan",
        "lastName": "Moss",
    }
    body.update(overrides)
    return body


def test_sign_up_starts_session(client):
    resp = client.post("/api/auth/sign-up", json=_sign_up_body())
    assert resp.status_code == 201
    assert resp.get_json()["user"] == {
        "email": "dan@dayflow.io",
        "employeeId": "EMP-010",
        "role": "employee",
        "name": "Dan Moss",
    }

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["employeeId"] == "EMP-010"


def test_sign_up_validation_error(client):
    resp = client.post("/api/auth/sign-up", json=_sign_up_body(confirmPassword="Other0!Pass"))
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Passwords do not match."}


def test_sign_up_rejects_unknown_role(client):
    resp = client.post("/api/auth/sign-up", json=_sign_up_body(role="superuser"))
    assert resp.status_code == 400


def test_sign_in_failure_is_401(client, make_user):
    make_user(employee_id="EMP-001", email="ana@dayflow.io")
    resp = client.post("/api/auth/sign-in", json={"email": "ana@dayflow.io", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid email or password."


def test_protected_route_requires_session(client):
    assert client.get("/api/auth/me").status_code == 401


def test_sign_out_clears_session(employee_client):
    employee_client.post("/api/auth/sign-out")
    assert employee_client.get("/api/auth/me").status_code == 401


def test_idle_session_expires(employee_client):
    with employee_client.session_transaction() as sess:
        sess["last_activity"] = (datetime.now() - timedelta(hours=25)).isoformat()

    resp = employee_client.get("/api/auth/me")
    assert resp.status_code == 401
    assert "expired" in resp.get_json()["message"]
    assert employee_client.get("/api/auth/me").status_code == 401


def test_password_reset_over_http(client, make_user, mailer):
    make_user(employee_id="EMP-001", email="ana@dayflow.io")

    resp = client.post("/api/auth/forgot-password", json={"email": "ana@dayflow.io"})
    assert resp.status_code == 200
    assert resp.get_json()["delivered"] is True
    (_, code), = mailer.outbox

    early = client.post(
        "/api/auth/reset-password",
        json={"email": "ana@dayflow.io", "password": "N3w!Password", "confirmPassword": "N3w!Password"},
    )
    assert early.status_code == 403

    resp = client.post("/api/auth/verify-reset-code", json={"email": "ana@dayflow.io", "otp": code})
    assert resp.status_code == 200

    resp = client.post(
        "/api/auth/reset-password",
        json={"email": "ana@dayflow.io", "password": "N3w!Password", "confirmPassword": "N3w!Password"},
    )
    assert resp.status_code == 200

    resp = client.post("/api/auth/sign-in", json={"email": "ana@dayflow.io", "password": "N3w!Password"})
    assert resp.status_code == 200


def test_forgot_password_unknown_email(client):
    resp = client.post("/api/auth/forgot-password", json={"email": "nobody@dayflow.io"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No account found with this email address."


def test_forgot_password_cooldown_is_429(client, make_user):
    make_user(employee_id="EMP-001", email="ana@dayflow.io")

    assert client.post("/api/auth/forgot-password", json={"email": "ana@dayflow.io"}).status_code == 200
    resp = client.post("/api/auth/forgot-password", json={"email": "ana@dayflow.io"})

    assert resp.status_code == 429
    assert resp.get_json()["message"].startswith("Please wait 60 seconds")
