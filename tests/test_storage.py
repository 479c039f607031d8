"""
Unit tests for the token store.

Storage contract:
- Missing/invalid file -> no tokens
- Only access_token / refresh_token are kept
- Clearing removes the file; clearing twice is harmless
- dispatch_change() notifies subscribers until they unsubscribe
"""

import json
import tempfile
import unittest
from pathlib import Path

from evex.storage import ACCESS_TOKEN, REFRESH_TOKEN, TokenStore


class TestTokenStore(unittest.TestCase):
    def test_missing_file_has_no_tokens(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = TokenStore(Path(d) / "missing.json")
            self.assertIsNone(store.get(ACCESS_TOKEN))
            self.assertIsNone(store.get(REFRESH_TOKEN))

    def test_set_persists_json_schema(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "session.json"
            store = TokenStore(p)
            store.set(ACCESS_TOKEN, "a1")
            store.set(REFRESH_TOKEN, "r1")

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data, {"access_token": "a1", "refresh_token": "r1"})
            # a second store on the same file sees the same tokens
            self.assertEqual(TokenStore(p).get(REFRESH_TOKEN), "r1")

    def test_unknown_key_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = TokenStore(Path(d) / "session.json")
            with self.assertRaises(KeyError):
                store.set("user", "alice")

    def test_corrupt_file_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "session.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertIsNone(TokenStore(p).get(ACCESS_TOKEN))

            p.write_text(json.dumps(["a", "b"]), encoding="utf-8")
            self.assertIsNone(TokenStore(p).get(ACCESS_TOKEN))

            p.write_text(json.dumps({"access_token": 5, "refresh_token": "r"}), encoding="utf-8")
            store = TokenStore(p)
            self.assertIsNone(store.get(ACCESS_TOKEN))
            self.assertEqual(store.get(REFRESH_TOKEN), "r")

    def test_clear_removes_file_and_is_idempotent(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "session.json"
            store = TokenStore(p)
            store.set(ACCESS_TOKEN, "a1")
            store.set(REFRESH_TOKEN, "r1")

            store.clear()
            self.assertFalse(p.exists())
            store.clear()
            self.assertIsNone(store.get(ACCESS_TOKEN))

    def test_remove_single_key(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = TokenStore(Path(d) / "session.json")
            store.set(ACCESS_TOKEN, "a1")
            store.set(REFRESH_TOKEN, "r1")
            store.remove(ACCESS_TOKEN)
            self.assertIsNone(store.get(ACCESS_TOKEN))
            self.assertEqual(store.get(REFRESH_TOKEN), "r1")

    def test_subscribe_and_unsubscribe(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = TokenStore(Path(d) / "session.json")
            seen: list[str] = []
            unsubscribe = store.subscribe(lambda: seen.append("changed"))

            store.dispatch_change()
            self.assertEqual(seen, ["changed"])

            unsubscribe()
            unsubscribe()
            store.dispatch_change()
            self.assertEqual(seen, ["changed"])


if __name__ == "__main__":
    unittest.main()
