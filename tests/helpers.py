import os
import sys
import tempfile
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db import database as db_database  # noqa: E402
from db import store  # noqa: E402


class StoreTestCase(unittest.IsolatedAsyncioTestCase):
    """Points the kv store at a fresh temporary file seeded from seed-data.json."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.sqlite")
        db_database.DB_PATH = self.db_path
        db_database._initialized = False

    def tearDown(self):
        self.temp_dir.cleanup()

    async def user(self, uid: int):
        found = await store.users.find(uid)
        assert found is not None, f"seed user {uid} missing"
        return found
