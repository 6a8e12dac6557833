SECRET_KEY = "test-secret"

APP_ID = "absensi-kelas-test"

STORE_BACKEND = "memory"

DB_CONFIG = None

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TOKEN_MAX_AGE = None

AUTO_INIT_DB = False
