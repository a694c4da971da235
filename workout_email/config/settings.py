"""
Environment settings loaded from .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- HTML parsing ---
HTML_PARSER: str = os.getenv("HTML_PARSER", "html.parser")

# Upper bound on the ancestor walk used to tell treadmill and rower blocks apart.
ANCESTOR_WALK_DEPTH: int = int(os.getenv("ANCESTOR_WALK_DEPTH", "20"))

# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
MAX_BODY_LOG_CHARS: int = int(os.getenv("MAX_BODY_LOG_CHARS", "500"))
