"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    ANTHROPIC_API_KEY          — Enables the live bug generator (Anthropic Messages API)
    GENERATION_MODEL           — Model name sent to the generator
    GENERATION_BASE_URL        — Generator API base URL
    GENERATION_MAX_TOKENS      — Max output tokens for one generation call
    GENERATION_TIMEOUT_SECONDS — Hard deadline for one generation call (default: 90)
    GITHUB_API_BASE            — Source-control REST API base URL
    RESULTS_DIR                — Directory for the file-backed results store
    LOG_LEVEL                  — Root log level (default: INFO)

Generation Deadline Philosophy:
    Exactly one generation call is made per stress request and it is
    awaited inline. GENERATION_TIMEOUT_SECONDS bounds that wait; hitting
    the deadline is treated like any other generator failure and the
    request degrades to the deterministic mutation planner.

File Size Ceilings:
    MAX_FILE_LINES_SINGLE is the only ceiling applied by file selection,
    because exactly one file is mutated per request.
    MAX_FILE_LINES_MULTIPLE is kept as configuration for multi-file
    mutation; the current selection policy never reads it.
"""
import os
from dotenv import load_dotenv

load_dotenv()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "claude-sonnet-4-20250514")
GENERATION_BASE_URL = os.getenv("GENERATION_BASE_URL", "https://api.anthropic.com/v1")
GENERATION_MAX_TOKENS = int(os.getenv("GENERATION_MAX_TOKENS", 16000))
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", 90))

GITHUB_API_BASE = os.getenv("GITHUB_API_BASE", "https://api.github.com")

# Per-file line ceilings
MAX_FILE_LINES_SINGLE = int(os.getenv("MAX_FILE_LINES_SINGLE", 5000))
MAX_FILE_LINES_MULTIPLE = int(os.getenv("MAX_FILE_LINES_MULTIPLE", 2000))

# Focus-area hint supplied by the player
CONTEXT_MAX_CHARS = 200

# Results persistence
RESULTS_DIR = os.getenv("RESULTS_DIR", "results")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
