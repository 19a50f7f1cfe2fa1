from __future__ import annotations

import logging

from flask import Flask

from ..common.web import fail, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .mailer import MailError
from .service import ResendCooldownError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    otp_service = container.otp_service

    @app.route("/send-otp", methods=["POST"], endpoint="send_otp")
    def send_otp():
        otp_service.cleanup_expired()
        email = str(json_body().get("email") or "")
        try:
            otp_service.send(email)
        except ResendCooldownError as e:
            return fail(str(e), 429)
        except ValidationError as e:
            return fail(str(e), 400)
        except MailError as e:
            return fail(str(e), 500)
        except Exception:
            logger.exception("Error sending OTP to %s", email)
            return fail("Failed to send OTP. Please try again later.", 500)

        return ok(message="OTP sent successfully!")

    @app.route("/verify-otp", methods=["POST"], endpoint="verify_otp")
    def verify_otp():
        body = json_body()
        email, otp = body.get("email"), body.get("otp")
        if not email or not otp:
            return fail("Email and OTP are required", 400)

        result = otp_service.verify(str(email), str(otp))
        if not result.success:
            return fail(result.message, 400)
        return ok(message=result.message)
