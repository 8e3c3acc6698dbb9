import os
from pathlib import Path

# Base directory (where this file lives)
BASE_DIR = Path(__file__).parent

# Copy this file to config.py and update with your values

# Recalculate only after this much quiet time following the last edit
DEBOUNCE_MS = 500

# Calculator sessions kept in memory (least recently used are dropped)
MAX_SESSIONS = 1000

# Gemini: leave the key unset to always serve the fallback tips
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL = "gemini-2.5-flash"

# Dashboard
DASHBOARD_HOST = "0.0.0.0"
DASHBOARD_PORT = 5000
SECRET_KEY = os.environ.get("VITALMETRIC_SECRET_KEY", "dev")  # Signs the session cookie
