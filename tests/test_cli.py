import contextlib
import io
import json
import os
import unittest
from unittest.mock import patch

MAPPING = {"human": "%0", "claude": "%1", "codex": "%2"}


def _session(*, current="%0", mapping=None):
    from agcmd.kernel.panes import PaneRegistry
    from agcmd.kernel.session import Session
    from agcmd.kernel.store import MemoryStore
    from agcmd.runners.fake import FakeHost

    store = MemoryStore()
    store.write_text("config.json", json.dumps({"agents": {"claude": {"command": "claude"}, "codex": {"command": "codex"}}}))
    mapping = MAPPING if mapping is None else mapping
    if mapping:
        PaneRegistry(store).save(mapping)
    panes = sorted(set(mapping.values()) | {current})
    return Session(host=FakeHost(panes=panes, current=current), store=store)


def _run(argv, session):
    from agcmd.cli import main

    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            code = main(argv, session=session)
        except SystemExit as e:
            code = int(e.code or 0)
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        patcher_env = patch.dict(os.environ, {"AGCMD_SUBMIT_DELAY": "0"})
        patcher_env.start()
        self.addCleanup(patcher_env.stop)
        os.environ.pop("AGCMD_HOME", None)

    def test_help_and_version_exit_zero(self) -> None:
        s = _session()
        for argv in ([], ["--help"], ["-h"], ["--version"], ["-v"]):
            code, out, _ = _run(argv, s)
            self.assertEqual(code, 0, argv)
            self.assertTrue(out, argv)
        code, out, _ = _run(["--version"], s)
        self.assertTrue(out.startswith("agcmd "))

    def test_send(self) -> None:
        s = _session()
        code, out, _ = _run(["claude", "send", "hello there"], s)
        self.assertEqual(code, 0)
        self.assertIn("Sent to claude", out)
        self.assertEqual(s.host.texts_for("%1"), ["hello there"])

    def test_raw_flag_anywhere(self) -> None:
        s = _session()
        _run(["--raw", "claude", "send", "wow!"], s)
        _run(["claude", "send", "wow!", "--raw"], s)
        self.assertEqual(s.host.texts_for("%1"), ["wow!", "wow!"])

    def test_review_diff_passes_git_flags(self) -> None:
        s = _session()
        code, _, _ = _run(["claude", "review-diff", "--staged", "--raw"], s)
        self.assertEqual(code, 0)
        self.assertTrue(s.host.texts_for("%1")[0].startswith("Review the git diff: git diff --staged\n"))

    def test_broadcast_reports_count(self) -> None:
        s = _session(current="%1")
        code, out, _ = _run(["all", "send", "sync"], s)
        self.assertEqual(code, 0)
        self.assertIn("broadcast to 1 agent(s)", out)

    def test_errors_exit_one(self) -> None:
        s = _session()
        code, _, err = _run(["gemini", "send", "hi"], s)
        self.assertEqual(code, 1)
        self.assertIn("Error: Unknown agent 'gemini'.", err)

        code, _, err = _run(["ask", "codex", "topic", "from the human pane"], s)
        self.assertEqual(code, 1)
        self.assertIn("Must run from an agent pane", err)

        code, _, err = _run(["claude", "send"], s)
        self.assertEqual(code, 1)

        code, _, err = _run(["claude", "dance", "now"], s)
        self.assertEqual(code, 1)

    def test_ask_from_agent_pane(self) -> None:
        s = _session(current="%1")
        code, out, _ = _run(["ask", "codex", "Auth Design", "token refresh?"], s)
        self.assertEqual(code, 0)
        self.assertIn("Question sent from claude to codex", out)
        self.assertIn("Topic name modified", out)
        self.assertIsNotNone(s.store.read_text("questions/auth-design/claude.md"))

    def test_start_declined_is_not_an_error(self) -> None:
        s = _session()
        with patch("builtins.input", return_value="n"):
            code, out, _ = _run(["start"], s)
        self.assertEqual(code, 0)
        self.assertIn("Aborted.", out)
        self.assertEqual(s.registry.load(), MAPPING)

    def test_start_fresh(self) -> None:
        s = _session(mapping={})
        code, out, _ = _run(["start"], s)
        self.assertEqual(code, 0)
        self.assertIn("Agent layout created successfully.", out)
        self.assertEqual(s.registry.load(), {"human": "%0", "claude": "%1", "codex": "%2"})


if __name__ == "__main__":
    unittest.main()
