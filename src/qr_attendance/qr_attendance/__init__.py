"""QR Attendance package.

Organized by feature modules (camera, scanning, payload, attendance, ...)
with a thin Flask controller layer over service/repository layers.
"""
