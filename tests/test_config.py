import json
import os
import tempfile
import unittest
from pathlib import Path


class TestConfig(unittest.TestCase):
    def test_missing_file_writes_defaults(self) -> None:
        from agcmd.kernel.config import load_config
        from agcmd.kernel.store import FileStore

        old_home = os.environ.get("AGCMD_HOME")
        try:
            with tempfile.TemporaryDirectory() as td:
                os.environ["AGCMD_HOME"] = td
                cfg = load_config(FileStore())
                self.assertEqual(cfg.agent_names, ["claude", "codex", "gemini"])
                self.assertFalse(cfg.log)

                doc = json.loads((Path(td) / "config.json").read_text(encoding="utf-8"))
                self.assertEqual(doc["agents"]["codex"], {"command": "codex"})
                self.assertIn("defaultReviewFormat", doc)
                self.assertIs(doc["log"], False)
                for sub in ("plans", "questions", "logs"):
                    self.assertTrue((Path(td) / sub).is_dir(), sub)
        finally:
            if old_home is None:
                os.environ.pop("AGCMD_HOME", None)
            else:
                os.environ["AGCMD_HOME"] = old_home

    def test_reads_existing_and_keeps_order(self) -> None:
        from agcmd.kernel.config import load_config
        from agcmd.kernel.store import MemoryStore

        store = MemoryStore()
        store.write_text(
            "config.json",
            json.dumps(
                {
                    "agents": {"zeta": {"command": "z --yolo"}, "alpha": {"command": "a"}},
                    "defaultReviewFormat": "short prose",
                    "log": True,
                    "extra": 1,
                }
            ),
        )
        cfg = load_config(store)
        self.assertEqual(cfg.agent_names, ["zeta", "alpha"])
        self.assertEqual(cfg.agents["zeta"].command, "z --yolo")
        self.assertEqual(cfg.default_review_format, "short prose")
        self.assertTrue(cfg.log)

    def test_malformed_json_names_file(self) -> None:
        from agcmd.kernel.config import load_config
        from agcmd.kernel.errors import ConfigParseError
        from agcmd.kernel.store import MemoryStore

        store = MemoryStore()
        store.write_text("config.json", "{ nope")
        with self.assertRaises(ConfigParseError) as ctx:
            load_config(store)
        self.assertIn("config.json", ctx.exception.message)

    def test_undecodable_config_names_file(self) -> None:
        from agcmd.kernel.config import load_config
        from agcmd.kernel.errors import ConfigParseError
        from agcmd.kernel.store import FileStore

        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "config.json").write_bytes(b"\xff\xfe{")
            with self.assertRaises(ConfigParseError) as ctx:
                load_config(FileStore(Path(td)))
        self.assertIn("Failed to parse config.json", ctx.exception.message)

    def test_reserved_agent_names_rejected(self) -> None:
        from agcmd.kernel.config import load_config
        from agcmd.kernel.errors import ConfigParseError
        from agcmd.kernel.store import MemoryStore

        for name in ("human", "all"):
            store = MemoryStore()
            store.write_text("config.json", json.dumps({"agents": {name: {"command": "x"}}}))
            with self.assertRaises(ConfigParseError):
                load_config(store)


if __name__ == "__main__":
    unittest.main()
