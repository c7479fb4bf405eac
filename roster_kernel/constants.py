"""
Roster Kernel: Constants

Reason messages, accepted value sets and policy defaults.
Runtime policy is injected via RosterPolicy; the values here are defaults.
"""

import re

# --- Policy defaults ---
ALLOW_EMPTY_ROSTERS: bool = False

# --- Value formats ---
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

AVAILABILITY_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# --- Reason messages ---
MSG_REQUIRED = "required"
MSG_END_BEFORE_START = "end must be after start"
MSG_BAD_TIME = "time must be HH:mm"
MSG_BAD_DATE = "date must be YYYY-MM-DD"
MSG_BAD_EMAIL = "invalid email"
MSG_NEGATIVE_PAY = "pay rate must be zero or more"
MSG_BAD_DAY = "unknown day"
MSG_DUPLICATE_AREA = "duplicate area name"
MSG_DUPLICATE_SECTION = "duplicate section"
MSG_EMPTY_ROSTER = "roster must have at least one shift"
MSG_UNKNOWN_AREA = "area does not belong to this location"
MSG_UNKNOWN_SECTION = "section does not belong to this area"
