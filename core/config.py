import os

from dotenv import load_dotenv

load_dotenv()

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "ffportal")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")

# Bare user IDs are turned into emails on this domain
HANDLE_EMAIL_DOMAIN = os.getenv("HANDLE_EMAIL_DOMAIN", "ffportal.com")
ADMIN_EMAILS = [email.strip().lower() for email in os.getenv("ADMIN_EMAILS", "").split(",") if email.strip()]

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MIN_PASSWORD_LENGTH = 6
MIN_DEPOSIT = int(os.getenv("MIN_DEPOSIT", "100"))
MIN_WITHDRAW = int(os.getenv("MIN_WITHDRAW", "200"))

DEFAULT_BKASH_NUMBER = os.getenv("DEFAULT_BKASH_NUMBER", "017XXXXXXXX")
DEFAULT_NAGAD_NUMBER = os.getenv("DEFAULT_NAGAD_NUMBER", "019XXXXXXXX")
DEFAULT_MARQUEE = os.getenv(
    "DEFAULT_MARQUEE",
    "Join the new mega tournament! Room ID is shared 10 minutes before the match.",
)
