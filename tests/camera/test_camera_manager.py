import threading

import pytest

from src.qr_attendance.qr_attendance.camera.manager import CameraDeviceManager, pick_default_device
from src.qr_attendance.qr_attendance.camera.model import CaptureDevice
from src.qr_attendance.qr_attendance.core.enums import CaptureErrorKind
from src.qr_attendance.qr_attendance.core.exceptions import CaptureError


def test_default_prefers_rear_facing_label():
    devices = [
        CaptureDevice("a", "Front Camera"),
        CaptureDevice("b", "camera2 1, facing ENVIRONMENT"),
    ]
    assert pick_default_device(devices).id == "b"


def test_default_falls_back_to_first_device():
    devices = [CaptureDevice("a", "USB Cam"), CaptureDevice("b", "Other")]
    assert pick_default_device(devices).id == "a"


def test_select_default_is_noop_on_empty_list(empty_capture_service):
    manager = CameraDeviceManager(empty_capture_service)

    assert manager.select_default([]) is None
    assert manager.preferred_device_id is None


def test_empty_device_list_never_binds(empty_capture_service):
    manager = CameraDeviceManager(empty_capture_service)
    assert manager.list_devices() == []

    with pytest.raises(CaptureError) as exc:
        manager.start()

    assert exc.value.kind == CaptureErrorKind.DEVICE_NOT_FOUND
    assert empty_capture_service.bind_calls == []
    assert not manager.is_active


def test_start_uses_default_selection(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.select_default(manager.list_devices())

    assert manager.start() == "1"
    assert manager.is_active
    assert manager.active_device_id == "1"
    assert capture_service.bind_calls == ["1"]


def test_start_failure_keeps_kind_and_leaves_inactive(capture_service):
    capture_service.bind_errors["0"] = CaptureError(CaptureErrorKind.PERMISSION_DENIED)
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()

    with pytest.raises(CaptureError) as exc:
        manager.start("0")

    assert exc.value.kind == CaptureErrorKind.PERMISSION_DENIED
    assert exc.value.user_message == "Camera access denied. Please allow camera permissions."
    assert not manager.is_active


def test_unexpected_bind_failure_is_unknown_capture_error(capture_service):
    capture_service.bind_errors["0"] = RuntimeError("driver exploded")
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()

    with pytest.raises(CaptureError) as exc:
        manager.start("0")
    assert exc.value.kind == CaptureErrorKind.UNKNOWN


def test_stop_is_idempotent_and_releases(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.stop()
    assert capture_service.release_calls == 0

    manager.start("0")
    manager.stop()
    manager.stop()

    assert capture_service.release_calls == 1
    assert not manager.is_active
    assert capture_service.bound is None
    assert manager.read_frame() is None


def test_start_while_active_on_same_device_does_not_rebind(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("0")
    manager.start("0")

    assert capture_service.bind_calls == ["0"]


def test_start_on_other_device_releases_first(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("0")
    manager.start("1")

    assert capture_service.release_calls == 1
    assert capture_service.bound == "1"
    assert manager.active_device_id == "1"


def test_switch_without_session_only_updates_preference(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.switch_device("1")

    assert manager.preferred_device_id == "1"
    assert capture_service.bind_calls == []
    assert not manager.is_active


def test_switch_rebinds_live_session(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("0")
    manager.switch_device("1")

    assert manager.is_active
    assert manager.active_device_id == "1"
    assert capture_service.bound == "1"
    assert capture_service.bind_calls == ["0", "1"]


def test_failed_switch_restores_previous_device(capture_service):
    capture_service.bind_errors["1"] = CaptureError(CaptureErrorKind.DEVICE_NOT_FOUND)
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("0")

    with pytest.raises(CaptureError):
        manager.switch_device("1")

    assert manager.is_active
    assert manager.active_device_id == "0"
    assert capture_service.bound == "0"


def test_restart_rebinds_last_device(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("1")

    assert manager.restart() == "1"
    assert capture_service.bind_calls == ["1", "1"]
    assert capture_service.release_calls == 1
    assert manager.is_active


def test_read_frame_feeds_sink(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("0")
    capture_service.frames.append("21BCE001 Jane Doe")

    assert manager.read_frame() == "21BCE001 Jane Doe"
    assert manager.sink.latest() == "21BCE001 Jane Doe"

    manager.close()
    assert manager.sink.latest() is None


def test_failed_release_during_switch_ends_session(capture_service):
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()
    manager.start("0")
    capture_service.release_error = RuntimeError("device busy")

    with pytest.raises(CaptureError) as exc:
        manager.switch_device("1")

    assert exc.value.kind == CaptureErrorKind.UNKNOWN
    assert not manager.is_active
    assert manager.active_device_id is None
    assert capture_service.bind_calls == ["0"]


def test_enumeration_waits_for_bind_in_progress(capture_service):
    binding, gate = threading.Event(), threading.Event()
    list_calls = []
    bind, list_devices = capture_service.bind, capture_service.list_devices

    def slow_bind(device_id, sink):
        binding.set()
        gate.wait(5)
        bind(device_id, sink)

    def counted_list_devices():
        list_calls.append(1)
        return list_devices()

    capture_service.bind = slow_bind
    capture_service.list_devices = counted_list_devices
    manager = CameraDeviceManager(capture_service)
    manager.list_devices()

    starter = threading.Thread(target=manager.start, args=("0",))
    starter.start()
    assert binding.wait(2)

    lister = threading.Thread(target=manager.list_devices)
    lister.start()
    lister.join(0.1)
    assert lister.is_alive()
    assert len(list_calls) == 1

    gate.set()
    starter.join(2)
    lister.join(2)
    assert len(list_calls) == 2
    assert manager.active_device_id == "0"
