"""Constants and defaults.

Note: Keep user-facing messages here so controllers and services agree on them.
"""

MSG_INVALID_PAYLOAD = "Invalid QR Code. Please try again."
MSG_ALREADY_MARKED = "Already marked present"
MSG_RECORDED = "Attendance marked successfully!"
MSG_PERSISTENCE_FAILURE = "Failed to update details."

MSG_CAMERA_PERMISSION_DENIED = "Camera access denied. Please allow camera permissions."
MSG_CAMERA_NOT_FOUND = "No camera found. Please ensure a camera is connected."
MSG_CAMERA_INSECURE = "Camera requires a secure stream. Please use an https or rtsps camera URL."
MSG_CAMERA_UNKNOWN = "Failed to start camera"

DEFAULT_SCAN_INTERVAL_SECONDS = 0.2
DEFAULT_CAMERA_MAX_PROBE = 4
DEFAULT_ATTENDANCE_LIST_LIMIT = 50

REAR_CAMERA_HINTS = ("back", "environment")
