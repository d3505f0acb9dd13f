import os

from dotenv import load_dotenv

load_dotenv()


# YouTube endpoints (non-official InnerTube web API)
YOUTUBE_BASE_URL = os.getenv("YOUTUBE_BASE_URL", "https://www.youtube.com")
YOUTUBE_VIDEO_URL = YOUTUBE_BASE_URL + "/watch?v={youtube_id}"
YOUTUBE_CONSENT_URL = os.getenv("YOUTUBE_CONSENT_URL", "https://consent.youtube.com/save")

# Network
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "60"))
YT_PROXY = os.getenv("YT_PROXY", "").strip()

# Retry policy for the InnerTube POST endpoint
AJAX_RETRIES = int(os.getenv("AJAX_RETRIES", "5"))
AJAX_RETRY_SLEEP = float(os.getenv("AJAX_RETRY_SLEEP", "20"))

# Delay between continuation pages (seconds)
PAGE_SLEEP = float(os.getenv("PAGE_SLEEP", "0.1"))

# Optional language override for server-rendered text (e.g. "en")
YT_LANGUAGE = os.getenv("YT_LANGUAGE", "").strip()
