import json
import os
import unittest
from unittest.mock import patch


def _session(agents, mapping, *, current, dead=()):
    from agcmd.kernel.panes import PaneRegistry
    from agcmd.kernel.session import Session
    from agcmd.kernel.store import MemoryStore
    from agcmd.runners.fake import FakeHost

    store = MemoryStore()
    store.write_text("config.json", json.dumps({"agents": {n: {"command": n} for n in agents}}))
    PaneRegistry(store).save(mapping)
    panes = sorted(set(mapping.values()) | {current})
    return Session(host=FakeHost(panes=panes, current=current, dead=set(dead)), store=store)


class TestBroadcast(unittest.TestCase):
    def setUp(self) -> None:
        patcher_env = patch.dict(os.environ, {"AGCMD_SUBMIT_DELAY": "0"})
        patcher_env.start()
        self.addCleanup(patcher_env.stop)
        os.environ.pop("AGCMD_HOME", None)

    def test_skips_self_and_missing(self) -> None:
        from agcmd.kernel.commands import send

        s = _session(["a", "b", "c"], {"human": "%0", "a": "%1", "b": "%2"}, current="%2")
        with self.assertLogs("agcmd.kernel.broadcast", level="WARNING") as logs:
            report = send(s, "all", "sync up")

        self.assertEqual(report.delivered, ["a"])
        self.assertEqual(report.count, 1)
        self.assertIn(("b", "self"), report.skipped)
        self.assertIn(("c", "pane not found"), report.skipped)
        self.assertTrue(any("'c'" in line for line in logs.output))
        self.assertEqual(s.host.texts_for("%1"), ["sync up"])
        self.assertEqual(s.host.texts_for("%2"), [])
        self.assertEqual(s.host.texts_for("%0"), [])

    def test_from_human_reaches_every_agent(self) -> None:
        from agcmd.kernel.commands import send

        mapping = {"human": "%0", "a": "%1", "b": "%2", "c": "%3"}
        s = _session(["a", "b", "c"], mapping, current="%0")
        report = send(s, "all", "hi")
        self.assertEqual(report.delivered, ["a", "b", "c"])
        self.assertEqual(report.skipped, [])

    def test_order_follows_registry(self) -> None:
        from agcmd.kernel.broadcast import broadcast_order
        from agcmd.kernel.config import default_config

        cfg = default_config()
        mapping = {"human": "%0", "gemini": "%1", "claude": "%2"}
        self.assertEqual(broadcast_order(cfg, mapping), ["gemini", "claude", "codex"])

    def test_host_rejection_is_skipped(self) -> None:
        from agcmd.kernel.commands import send

        mapping = {"human": "%0", "a": "%1", "b": "%2", "c": "%3"}
        s = _session(["a", "b", "c"], mapping, current="%0", dead={"%2"})
        with self.assertLogs("agcmd.kernel.broadcast", level="WARNING"):
            report = send(s, "all", "hi")
        self.assertEqual(report.delivered, ["a", "c"])
        self.assertEqual([name for name, _ in report.skipped], ["b"])

    def test_broadcast_plan_uses_per_agent_paths(self) -> None:
        from agcmd.kernel.commands import plan

        mapping = {"human": "%0", "a": "%1", "b": "%2"}
        s = _session(["a", "b"], mapping, current="%0")
        report = plan(s, "all", "Feature 1", "Auth flow")
        self.assertEqual(report.count, 2)
        self.assertIn("Save your plan to: ~/.agcmd/plans/feature-1/a.md", s.host.texts_for("%1")[0])
        self.assertIn("Save your plan to: ~/.agcmd/plans/feature-1/b.md", s.host.texts_for("%2")[0])
        self.assertIn("Feature name modified: 'Feature 1' → 'feature-1'", report.notices)


if __name__ == "__main__":
    unittest.main()
