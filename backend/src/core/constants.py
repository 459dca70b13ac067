"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255
MAX_NOTE_LENGTH = 500
MAX_ROOM_NUMBER_LENGTH = 50
MAX_PATIENT_REF_LENGTH = 100

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# Weekday tags, index matches date.weekday() (0=Monday)
WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']

# Consultation modes
CONSULTATION_MODE_IN_PERSON = "in-person"
CONSULTATION_MODE_ONLINE = "online"
CONSULTATION_MODE_BOTH = "both"
CONSULTATION_MODES = [CONSULTATION_MODE_IN_PERSON, CONSULTATION_MODE_ONLINE, CONSULTATION_MODE_BOTH]
ROOM_REQUIRED_MODES = [CONSULTATION_MODE_IN_PERSON, CONSULTATION_MODE_BOTH]

# Schedule statuses
SCHEDULE_STATUS_ACTIVE = "active"
SCHEDULE_STATUS_INACTIVE = "inactive"
SCHEDULE_STATUSES = [SCHEDULE_STATUS_ACTIVE, SCHEDULE_STATUS_INACTIVE]

# Accepted in place of a valid_to date to mean "no end date"
NO_END_SENTINEL = "always"

# Slot statuses
SLOT_STATUS_AVAILABLE = "available"
SLOT_STATUS_BOOKED = "booked"
SLOT_STATUS_BLOCKED = "blocked"

# Booking statuses
BOOKING_STATUS_CONFIRMED = "confirmed"
BOOKING_STATUS_CANCELLED = "cancelled"

# Batch availability requests
MAX_BATCH_DATES = 31

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:3000",      # Next.js dev server
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]
