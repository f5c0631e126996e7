"""
Pytest configuration for the receipt parser tests.

Points the service at a throwaway SQLite file and storage directory before
any receiptapi module is imported, and puts api/ on sys.path.
"""

import os
import sys
import tempfile

_tmp = tempfile.mkdtemp(prefix="receiptapi-tests-")
os.environ.setdefault("DB_URL", "sqlite:///" + os.path.join(_tmp, "receipts.db"))
os.environ.setdefault("LOCAL_STORAGE_DIR", os.path.join(_tmp, "storage"))
os.environ.setdefault("API_KEYS", "test_key:user_1,other_key:user_2")
os.environ.setdefault("LOG_JSON", "false")
os.environ.pop("DATABASE_URL", None)

api_path = os.path.join(os.path.dirname(__file__), "..")
if api_path not in sys.path:
    sys.path.insert(0, api_path)
