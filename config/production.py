import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

APP_ID = os.getenv("APP_ID", "absensi-kelas-default")

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "absensi_kelas"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TOKEN_MAX_AGE = int(os.getenv("TOKEN_MAX_AGE", str(30 * 24 * 3600)))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
