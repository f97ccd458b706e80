from __future__ import annotations

import atexit
import importlib
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .camera.controller import register as register_camera
from .container import Container, ScannerSettings, build_container
from .core.exceptions import CaptureError
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _auto_start_camera(container: Container) -> None:
    manager = container.camera_manager
    devices = manager.list_devices()
    if not devices:
        logger.info("no camera available, waiting for operator")
        return
    manager.select_default(devices)
    try:
        manager.start()
    except CaptureError as e:
        container.workflow.report_capture_error(e)
        return
    container.workflow.camera_started()


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if app.config["DEBUG"]:
            print(
                "[qr-attendance] settings=", settings_module,
                " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            if app.config["DEBUG"]:
                print(f"[qr-attendance] schema ready (tables={len(list_tables(db_config))})")

        container = build_container(db_config=db_config, settings=ScannerSettings.from_settings(settings))

    register_camera(app, container)
    register_attendance(app, container)
    app.extensions["qr_attendance"] = container

    if container.settings.auto_start_camera:
        _auto_start_camera(container)
    if not app.config["TESTING"]:
        container.decode_loop.start()
    atexit.register(container.shutdown)

    return app


def run() -> None:
    app = create_app()
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        debug=app.config["DEBUG"],
        use_reloader=False,
        threaded=True,
    )


if __name__ == "__main__":
    run()
