from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.log_setup import setup_logging
from .core.constants import DEFAULT_PORT
from .container import Container, build_container, build_storage
from .storage.bootstrap import apply_schema, list_tables
from .storage.mysql_storage import MySQLStorage

from .attendance.controller import register as register_attendance
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .otp.controller import register as register_otp
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["LOG_LEVEL"] = getattr(settings, "LOG_LEVEL", "INFO")
    setup_logging(app)

    if container is None:
        backend = getattr(settings, "STORAGE_BACKEND", "memory")
        storage = build_storage(
            backend=backend,
            data_file=getattr(settings, "DATA_FILE", ""),
            db_config=getattr(settings, "DB_CONFIG", None),
        )
        logger.info("settings=%s storage=%s", settings_module, backend)

        if isinstance(storage, MySQLStorage) and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(storage.conn_factory)
            logger.info("schema ready (tables=%d)", len(list_tables(storage.conn_factory)))

        container = build_container(
            storage=storage,
            mail_config=getattr(settings, "MAIL_CONFIG", None),
            otp_ttl_seconds=int(getattr(settings, "OTP_TTL_SECONDS", 300)),
            otp_resend_cooldown_seconds=int(getattr(settings, "OTP_RESEND_COOLDOWN_SECONDS", 60)),
        )

    register_otp(app, container)
    register_users(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_payroll(app, container)

    return app


def run() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    app = create_app()
    app.run(host="0.0.0.0", port=int(getattr(settings, "PORT", DEFAULT_PORT)), debug=app.config["DEBUG"])


if __name__ == "__main__":
    run()
