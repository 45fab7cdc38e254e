# exam_core/examinations/constants.py

UNKNOWN_PATIENT_NAME = "Unknown"

# Terminal states: once reached, a session is never reopened.
TERMINAL_STATUSES = ("completed", "cancelled")
