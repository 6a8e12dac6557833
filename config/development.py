import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Namespace prefix: artifacts/<APP_ID>/users/<uid>
APP_ID = os.getenv("APP_ID", "absensi-kelas-default")

# "memory" keeps data in-process (lost on restart); "mysql" uses DB_CONFIG.
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "absensi_kelas"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Custom sign-in tokens never expire unless set (seconds).
TOKEN_MAX_AGE = int(os.getenv("TOKEN_MAX_AGE")) if os.getenv("TOKEN_MAX_AGE") else None

# If enabled (mysql backend), app applies database/schema.sql on startup (idempotent).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
