import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read once at import time, so point the sqlite files at a scratch
# directory before any app module is collected.
_SCRATCH_DIR = tempfile.mkdtemp(prefix="career-path-tests-")
os.environ.setdefault("TELEMETRY_DB_PATH", os.path.join(_SCRATCH_DIR, "telemetry.db"))
os.environ.setdefault("CAREER_PATH_DB_PATH", os.path.join(_SCRATCH_DIR, "career_paths.db"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("AUTH_MODE", "public")
os.environ.setdefault("API_KEY", "")
os.environ.setdefault("OPENAI_API_KEY", "")
