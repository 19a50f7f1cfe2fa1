SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
PORT = 5000

STORAGE_BACKEND = "memory"
DATA_FILE = ""

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "dayflow_test",
}

AUTO_INIT_DB = False

# No credentials: mail delivery is reported as not configured
MAIL_CONFIG = {
    "host": "localhost",
    "port": 25,
    "username": "",
    "password": "",
    "sender": "",
    "use_tls": False,
}

OTP_TTL_SECONDS = 300
OTP_RESEND_COOLDOWN_SECONDS = 60
