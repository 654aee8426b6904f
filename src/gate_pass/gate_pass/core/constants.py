"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15
MIN_PASSWORD_LENGTH = 6
DEFAULT_SESSION_HOURS = 24

MAX_PHOTO_BYTES = 10 * 1024 * 1024
ALLOWED_PHOTO_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
PROFILE_PHOTO_URL_PREFIX = "/uploads/profile-photos/"

QR_TOKEN_SALT = "gate-pass-qr"

# Column widths in database/schema.sql
MAX_USERNAME_LENGTH = 64
MAX_NAME_LENGTH = 120
MAX_ROOM_LENGTH = 32
MAX_COURSE_LENGTH = 120
MAX_BATCH_LENGTH = 32
MAX_SLOT_LENGTH = 40
MAX_DESTINATION_LENGTH = 255
# TEXT columns hold 65535 bytes; 4 bytes per utf8mb4 character
MAX_TEXT_LENGTH = 16000
