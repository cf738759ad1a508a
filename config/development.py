import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_admin"),
}

# Office geofence for in-office employees
OFFICE_LAT = float(os.getenv("OFFICE_LAT", "11.603722"))
OFFICE_LNG = float(os.getenv("OFFICE_LNG", "76.209250"))
OFFICE_RADIUS_M = float(os.getenv("OFFICE_RADIUS_M", "100"))
ENFORCE_LOCATION_CHECK = bool(int(os.getenv("ENFORCE_LOCATION_CHECK", "1")))

# HH:MM; leave empty to record every check-in as present
LATE_AFTER = os.getenv("LATE_AFTER", "")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "0"))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also upsert the demo admin/employee accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
