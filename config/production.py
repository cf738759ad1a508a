import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_admin"),
}

OFFICE_LAT = float(os.getenv("OFFICE_LAT", "11.603722"))
OFFICE_LNG = float(os.getenv("OFFICE_LNG", "76.209250"))
OFFICE_RADIUS_M = float(os.getenv("OFFICE_RADIUS_M", "100"))
ENFORCE_LOCATION_CHECK = bool(int(os.getenv("ENFORCE_LOCATION_CHECK", "1")))

LATE_AFTER = os.getenv("LATE_AFTER", "")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "0"))

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
