"""Example: run one attendance cycle from a photo, without Flask.

Controllers are a thin layer; the same workflow runs from a script.

    APP_ENV=development python examples/scan_image.py badge.jpg
"""

import importlib
import sys
from pathlib import Path

from PIL import Image

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.qr_attendance.qr_attendance.container import ScannerSettings, build_container
from src.qr_attendance.qr_attendance.core.enums import WorkflowState
from src.qr_attendance.qr_attendance.payload.model import ScanEvent


def main():
    if len(sys.argv) != 2:
        raise SystemExit("usage: scan_image.py <image>")

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=ScannerSettings.from_settings(settings))

    result = container.decoder.decode(Image.open(sys.argv[1]).convert("RGB"))
    if not result.is_found:
        raise SystemExit("No QR code found in image")

    snap = container.workflow.on_scan(ScanEvent(raw_payload=result.payload))
    if snap.state == WorkflowState.AWAITING_CONFIRMATION:
        print(f"Marking {snap.identity.registration_number} ({snap.identity.full_name})")
        snap = container.workflow.confirm()
    print(snap.outcome.message)


if __name__ == "__main__":
    main()
