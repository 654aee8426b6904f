import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gate_pass_db"),
}

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads/profile_photos")
SESSION_HOURS = int(os.getenv("SESSION_HOURS", "24"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# Apply database/schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Also create the default warden/guard accounts
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
