from __future__ import annotations

from flask import Flask, session

from ..common.web import api_view, json_body, login_required, ok, start_session
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/auth/sign-up", methods=["POST"], endpoint="sign_up")
    @api_view
    def sign_up():
        body = json_body()
        try:
            role = Role(body.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Invalid account type")

        user = auth.sign_up(
            employee_id=str(body.get("employeeId") or ""),
            email=str(body.get("email") or ""),
            password=str(body.get("password") or ""),
            confirm_password=str(body.get("confirmPassword") or ""),
            role=role,
            first_name=str(body.get("firstName") or ""),
            last_name=str(body.get("lastName") or ""),
            department=str(body.get("department") or ""),
            position=str(body.get("position") or ""),
        )
        start_session(user)
        return ok(201, message="Account created successfully!", user=_user_json(user))

    @app.route("/api/auth/sign-in", methods=["POST"], endpoint="sign_in")
    @api_view
    def sign_in():
        body = json_body()
        user = auth.sign_in(str(body.get("email") or ""), str(body.get("password") or ""))
        start_session(user)
        return ok(message="Signed in successfully!", user=_user_json(user))

    @app.route("/api/auth/sign-out", methods=["POST"], endpoint="sign_out")
    def sign_out():
        session.clear()
        return ok(message="Signed out.")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(
            user={
                "email": session["email"],
                "employeeId": session["employee_id"],
                "role": session["role"],
                "name": session.get("name", ""),
                "loginTime": session.get("login_time"),
                "lastActivity": session.get("last_activity"),
            }
        )

    @app.route("/api/auth/forgot-password", methods=["POST"], endpoint="forgot_password")
    @api_view
    def forgot_password():
        result = auth.request_password_reset(str(json_body().get("email") or ""))
        return ok(delivered=result.delivered, message=result.message)

    @app.route("/api/auth/verify-reset-code", methods=["POST"], endpoint="verify_reset_code")
    @api_view
    def verify_reset_code():
        body = json_body()
        result = auth.verify_reset_code(str(body.get("email") or ""), str(body.get("otp") or ""))
        if not result.success:
            raise ValidationError(result.message)
        return ok(message=result.message)

    @app.route("/api/auth/reset-password", methods=["POST"], endpoint="reset_password")
    @api_view
    def reset_password():
        body = json_body()
        auth.reset_password(
            str(body.get("email") or ""),
            str(body.get("password") or ""),
            str(body.get("confirmPassword") or ""),
        )
        return ok(message="Password reset successfully. Please sign in with your new password.")


def _user_json(user) -> dict:
    return {
        "email": user.email,
        "employeeId": user.employee_id,
        "role": user.role.value,
        "name": user.display_name,
    }
