from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, request

from ..common.validators import optional_str, require_non_empty
from ..container import Container
from ..core.exceptions import CaptureError, ValidationError

logger = logging.getLogger(__name__)


def camera_status(container: Container) -> dict:
    manager = container.camera_manager
    devices = manager.devices
    return {
        "devices": [{"id": d.id, "label": d.label} for d in devices],
        "preferred_device": manager.preferred_device_id,
        "active": manager.is_active,
        "active_device": manager.active_device_id,
        # No devices means no start control and no bind attempt.
        "can_start": bool(devices),
    }


def register(app: Flask, container: Container) -> None:
    manager = container.camera_manager
    workflow = container.workflow

    def _capture_failed(e: CaptureError):
        workflow.report_capture_error(e)
        return jsonify({
            "success": False,
            "error": e.kind.value,
            "message": e.user_message,
            "camera": camera_status(container),
        }), 400

    @app.route("/api/cameras", methods=["GET"], endpoint="api_cameras")
    def api_cameras():
        devices = manager.list_devices()
        if manager.preferred_device_id is None:
            manager.select_default(devices)
        return jsonify(camera_status(container)), 200

    @app.route("/api/camera/start", methods=["POST"], endpoint="api_camera_start")
    def api_camera_start():
        device_id = optional_str(request.get_json(silent=True), "deviceId")
        if not manager.devices:
            manager.select_default(manager.list_devices())
        try:
            manager.start(device_id)
        except CaptureError as e:
            return _capture_failed(e)
        workflow.camera_started()
        return jsonify({"success": True, "camera": camera_status(container)}), 200

    @app.route("/api/camera/stop", methods=["POST"], endpoint="api_camera_stop")
    def api_camera_stop():
        manager.stop()
        return jsonify({"success": True, "camera": camera_status(container)}), 200

    @app.route("/api/camera/switch", methods=["POST"], endpoint="api_camera_switch")
    def api_camera_switch():
        try:
            device_id = require_non_empty(optional_str(request.get_json(silent=True), "deviceId"), "deviceId")
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        try:
            manager.switch_device(device_id)
        except CaptureError as e:
            return _capture_failed(e)
        return jsonify({"success": True, "camera": camera_status(container)}), 200

    @app.route("/api/camera/frame.jpg", methods=["GET"], endpoint="api_camera_frame")
    def api_camera_frame():
        jpeg = manager.sink.latest_jpeg()
        if jpeg is None:
            return jsonify({"success": False, "message": "Camera is not running"}), 404
        return Response(jpeg, mimetype="image/jpeg", headers={"Cache-Control": "no-store"})
