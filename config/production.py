import os

SECRET_KEY = os.environ["SECRET_KEY"]

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "gate_pass"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gate_pass_db"),
}

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/var/lib/gate_pass/profile_photos")
SESSION_HOURS = int(os.getenv("SESSION_HOURS", "24"))
SESSION_COOKIE_SECURE = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
