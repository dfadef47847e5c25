import os
from datetime import date
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"

# Only required once an engine is actually built (see db/engine.py)
DATABASE_URL = os.getenv("DATABASE_URL")

SCHEMA: Optional[str] = os.getenv("DB_SCHEMA") or None

SERVICE_LEDGER_CAPACITY = int(os.getenv("SERVICE_LEDGER_CAPACITY", "10"))
if SERVICE_LEDGER_CAPACITY < 1:
    raise ValueError("SERVICE_LEDGER_CAPACITY must be a positive integer")

RATE_POLICY = os.getenv("RATE_POLICY", "run_date").lower()
if RATE_POLICY not in ("run_date", "checkin_date"):
    raise ValueError("RATE_POLICY must be 'run_date' or 'checkin_date'")

RATE_AS_OF_RAW = os.getenv("RATE_AS_OF")
RATE_AS_OF: Optional[date] = date.fromisoformat(RATE_AS_OF_RAW) if RATE_AS_OF_RAW else None

CONFIRM_ON_PRICING = os.getenv("CONFIRM_ON_PRICING", "true").lower() == "true"

FLOW_LOOP_LIMIT = int(os.getenv("FLOW_LOOP_LIMIT", "5"))
