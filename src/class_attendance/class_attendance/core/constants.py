"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

AT_RISK_THRESHOLD = 75.0
PERCENT_PRECISION = 2

HIDDEN_NAME = "Hidden"
HIDDEN_ROLL_NUMBER = "***"

UNKNOWN_SUBJECT = "Unknown"
NO_TOPIC = "-"

DEFAULT_SESSION_DAYS = 7
DEFAULT_STUDENT_PASSWORD = "password123"
MIN_PASSWORD_LENGTH = 6

SESSION_CREATE_ATTEMPTS = 3
