"""FaceSync package.

Biometric check-in for course attendance: landmark matching (matching/),
enrolled templates (templates/), course rosters (courses/) and attendance
sessions (sessions/), wired together by a thin Flask controller layer.
"""
