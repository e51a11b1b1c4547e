import os
from dotenv import load_dotenv

load_dotenv()

# Page the binder opens when no --url is given
FORM_URL = os.getenv("REFIELDS_FORM_URL", "http://localhost:5173/")

# Explicit wait time for Selenium + Headless mode
WAIT_TIME = int(os.getenv("REFIELDS_WAIT_TIME", "10"))
IMPLICIT_WAIT = int(os.getenv("REFIELDS_IMPLICIT_WAIT", "3"))
HEADLESS = os.getenv("REFIELDS_HEADLESS", "false").lower() == "true"

# --- Instrumentation / diagnostics ---
LOG_MODE = os.getenv("REFIELDS_LOG_MODE", "live").lower()  # live | debug | trace
LOG_FILE = os.getenv("REFIELDS_LOG_FILE", "refields.log")
LOG_RATE_LIMITS_S = {
    "REG.unknown_field": 1.0,
    "REG.snapshot": 60.0,
}

# Where value snapshots land when the entry point is asked to dump them
DUMP_DIR = os.getenv("REFIELDS_DUMP_DIR", "dumps")
