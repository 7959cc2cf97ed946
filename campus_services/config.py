"""
config.py — Runtime settings for the campus services tracker
============================================================
Values come from the environment, with a .env file next to the working
directory loaded first. See .env.example for the full list.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ── MCP server ────────────────────────────────────────────────────────────────
SERVER_NAME = os.getenv("CAMPUS_SERVER_NAME", "campus-services-server")
HOST = os.getenv("CAMPUS_HOST", "0.0.0.0")
PORT = int(os.getenv("CAMPUS_PORT", 8001))

# Used by the demo client; must match host/port/path of the running server
SERVER_URL = os.getenv("CAMPUS_SERVER_URL", f"http://localhost:{PORT}/mcp")

# ── Behaviour ─────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("CAMPUS_LOG_LEVEL", "INFO").upper()
SEED_FIXTURES = os.getenv("CAMPUS_SEED_FIXTURES", "true").lower() == "true"
TOP_CATEGORIES = int(os.getenv("CAMPUS_TOP_CATEGORIES", 5))

# bcrypt cost factor for registered passwords (tests lower this)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))
