import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


GOOGLE_CLOUD_PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT_ID", "")
FIRESTORE_EMULATOR_HOST = os.getenv("FIRESTORE_EMULATOR_HOST", "")
LOCAL_ENV = _env_flag("LOCAL_ENV")
TESTING = _env_flag("TESTING")

# "production" turns off the offline read fallback
APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
IS_PRODUCTION = APP_ENV == "production"

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "300"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SERVICE_ACCOUNT_FILES = [
    "firebase_cred.json",
    "serviceAccountKey.json",
]
