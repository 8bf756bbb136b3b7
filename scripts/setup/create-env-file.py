#!/usr/bin/env python3
"""Create a local .env file for development"""
import os
from pathlib import Path

# project root
project_root = Path(__file__).parent.parent.parent
env_file = project_root / ".env"

# the Gemini key has to be filled in manually
env_content = """# Gemini
GEMINI_API_KEY=<GEMINI_API_KEY>
GEMINI_MODEL=gemini-2.5-flash
GEMINI_MAX_CONCURRENT=2
GEMINI_MAX_RETRIES=3
GEMINI_TIMEOUT_SECONDS=60

# Question source
# static bank matches needed before falling back to generation
LOCAL_MATCH_THRESHOLD=3

# Test sessions
SESSION_TTL_SECONDS=3600
TIMER_INTERVAL_SECONDS=1.0

# CORS
ALLOWED_ORIGINS=http://localhost:3000,http://localhost:5173

# Environment
# development shows detailed error messages
ENVIRONMENT=development
PORT=8001
"""


def create_env_file():
    """.env file (UTF-8 without BOM, LF line endings)"""
    print(f"[INFO] Creating .env file: {env_file}")

    # keep a backup of an existing file
    if env_file.exists():
        backup_file = project_root / ".env.backup"
        print(f"[INFO] Backing up existing .env file: {backup_file}")
        backup_file.write_text(env_file.read_text(encoding="utf-8"), encoding="utf-8", newline="\n")

    with open(env_file, "w", encoding="utf-8", newline="\n") as f:
        f.write(env_content)

    print("[OK] .env file created")
    print(f"[INFO] Location: {env_file}")

    # chmod is not available on Windows
    if os.name != "nt":
        os.chmod(env_file, 0o600)
        print("[INFO] Permissions set to 600")


if __name__ == "__main__":
    try:
        create_env_file()
        print("\n[OK] Done")
    except OSError as e:
        print(f"\n[ERROR] {e.__class__.__name__}: {e}")
        raise SystemExit(1)
