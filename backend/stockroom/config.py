import os
import sys
from dotenv import load_dotenv

load_dotenv()

VERSION = "1.2.0"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./inventory.db")
# Set DEBUG=false in production
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()

# Signing key for password-reset tokens
_DEFAULT_SECRET_KEY = "change-this-secret-key-in-production-32chars"
SECRET_KEY = os.getenv("SECRET_KEY", _DEFAULT_SECRET_KEY)

if not DEBUG and SECRET_KEY == _DEFAULT_SECRET_KEY:
    print(
        "[SECURITY ERROR] The default SECRET_KEY is in use with DEBUG=false. "
        "Set the SECRET_KEY environment variable to a long random string.",
        file=sys.stderr,
    )
    sys.exit(1)

ALGORITHM = "HS256"
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))

# Session cookie. SESSION_COOKIE_SECURE must be true behind TLS.
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "stockroom_session")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
SESSION_IDLE_MINUTES = int(os.getenv("SESSION_IDLE_MINUTES", "120"))

# Roles
ROLE_SHOPKEEPER = "Shopkeeper"
ROLE_ASSISTANT = "Assistant"
ROLES = (ROLE_SHOPKEEPER, ROLE_ASSISTANT)

BCRYPT_ROUNDS = 10

# Links in outgoing mail point here
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000").rstrip("/")

# Mail. Without SMTP_HOST, messages are logged instead of sent.
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
SMTP_TIMEOUT_SECONDS = float(os.getenv("SMTP_TIMEOUT_SECONDS", "15"))
MAIL_FROM = os.getenv("MAIL_FROM", "Stockroom <no-reply@example.com>")

LOW_STOCK_THRESHOLD = 10
