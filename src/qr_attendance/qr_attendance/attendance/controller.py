from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, request, send_file
from PIL import Image, UnidentifiedImageError

from ..badges.service import make_badge_png
from ..camera.controller import camera_status
from ..container import Container
from ..core.constants import DEFAULT_ATTENDANCE_LIST_LIMIT
from ..core.exceptions import InvalidTransitionError, ValidationError
from ..payload.model import ScanEvent

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    workflow = container.workflow

    def _state():
        return {
            "workflow": workflow.snapshot().to_dict(),
            "camera": camera_status(container),
        }

    def _transition(action):
        try:
            action()
        except InvalidTransitionError as e:
            return jsonify({"success": False, "message": str(e), **_state()}), 409
        return jsonify({"success": True, **_state()}), 200

    @app.route("/api/scan/state", methods=["GET"], endpoint="api_scan_state")
    def api_scan_state():
        return jsonify(_state()), 200

    @app.route("/api/scan/confirm", methods=["POST"], endpoint="api_scan_confirm")
    def api_scan_confirm():
        return _transition(workflow.confirm)

    @app.route("/api/scan/cancel", methods=["POST"], endpoint="api_scan_cancel")
    def api_scan_cancel():
        return _transition(workflow.cancel)

    @app.route("/api/scan/acknowledge", methods=["POST"], endpoint="api_scan_acknowledge")
    def api_scan_acknowledge():
        return _transition(workflow.acknowledge)

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    def api_scan_image():
        """Decode an uploaded photo of a badge and feed it to the workflow."""
        if "image" not in request.files:
            return jsonify({"success": False, "message": "Missing image file"}), 400

        try:
            img = Image.open(request.files["image"].stream).convert("RGB")
        except (UnidentifiedImageError, OSError):
            return jsonify({"success": False, "message": "Could not read image"}), 400

        result = container.decoder.decode(img)
        if result.error is not None:
            logger.warning("uploaded image could not be decoded: %s", result.error)
            return jsonify({"success": False, "message": "Could not read image"}), 400
        if not result.is_found:
            return jsonify({"success": False, "message": "No QR code found in image"}), 400

        return _transition(lambda: workflow.on_scan(ScanEvent(raw_payload=result.payload)))

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    def api_attendance():
        limit = request.args.get("limit", type=int) or DEFAULT_ATTENDANCE_LIST_LIMIT
        svc = container.attendance_service
        try:
            rows = svc.list_present(limit=max(1, min(limit, 500)))
        except Exception:
            logger.exception("failed to list attendance")
            return jsonify({"success": False, "message": "Failed to load attendance"}), 500
        return jsonify({"success": True, "rows": [svc.to_ui(r) for r in rows]}), 200

    @app.route("/api/badges/<registration_number>.png", methods=["GET"], endpoint="api_badge_image")
    def api_badge_image(registration_number: str):
        """Printable QR badge encoding `<registration number> <name>`."""
        try:
            png = make_badge_png(registration_number, request.args.get("name", ""))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return send_file(io.BytesIO(png), mimetype="image/png")
