import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch


class TestAtomicWrite(unittest.TestCase):
    def test_replaces_whole_file(self) -> None:
        from agcmd.util.fs import atomic_write_text

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "nested" / "panes.json"
            atomic_write_text(path, "first\n")
            atomic_write_text(path, "second\n")
            self.assertEqual(path.read_text(encoding="utf-8"), "second\n")
            self.assertEqual([p.name for p in path.parent.iterdir()], ["panes.json"])

    def test_failed_replace_surfaces_its_own_error(self) -> None:
        from agcmd.util import fs

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "panes.json"
            with patch.object(fs.os, "replace", side_effect=OSError("replace failed")), patch.object(
                fs.os, "unlink", side_effect=PermissionError("temp file locked")
            ):
                with self.assertRaises(OSError) as ctx:
                    fs.atomic_write_text(path, "{}\n")
            self.assertEqual(str(ctx.exception), "replace failed")
            self.assertFalse(path.exists())


if __name__ == "__main__":
    unittest.main()
