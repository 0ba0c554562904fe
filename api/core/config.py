# core/config.py
import os

from dotenv import load_dotenv

# Load .env
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# ---- DATABASE ----
SCRIPTURE_DB = os.getenv("SCRIPTURE_DB", os.path.join(BASE_DIR, "scripture.db"))
DB_BUSY_TIMEOUT_SECONDS = float(os.getenv("DB_BUSY_TIMEOUT_SECONDS", "10"))

# ---- TRANSLATIONS ----
ESV = "esv"
KJV = "kjv"
NASB = "nasb"
SUPPORTED_TRANSLATIONS = (ESV, KJV, NASB)
LOCAL_TRANSLATIONS = (KJV, NASB)
DEFAULT_TRANSLATION = ESV

# ---- ESV API ----
# ESV_API_TOKEN is read by EsvClient at call time
ESV_API_URL = os.getenv("ESV_API_URL", "https://api.esv.org/v3/passage/text/")
ESV_REQUEST_TIMEOUT = int(os.getenv("ESV_REQUEST_TIMEOUT", "15"))

# ESV API free tier: at most 500 verses cached at any time
ESV_VERSE_LIMIT = int(os.getenv("ESV_VERSE_LIMIT", "500"))

# ---- CACHE ----
SCRIPTURE_CACHE_TTL_DAYS = int(os.getenv("SCRIPTURE_CACHE_TTL_DAYS", "30"))
HTTP_CACHE_CONTROL = "public, max-age=86400, stale-while-revalidate=604800"

# ---- LOGGING ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
