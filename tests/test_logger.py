"""Tests for camp_sim.viz.logger: SimLogger."""
from __future__ import annotations

import json

from camp_sim.viz.logger import SimLogger


class TestRecentFeed:
    def test_newest_first(self) -> None:
        log = SimLogger()
        log.log(SimLogger.FIRE, "Fire lit.")
        log.log(SimLogger.HARVEST, "Haldor got wood.")
        assert log.recent == ["Haldor got wood.", "Fire lit."]

    def test_capped_at_five(self) -> None:
        log = SimLogger()
        for i in range(7):
            log.log(SimLogger.COMMAND, f"msg {i}")
        assert log.recent == ["msg 6", "msg 5", "msg 4", "msg 3", "msg 2"]
        # The full record keeps everything
        assert len(log.entries) == 7

    def test_revision_counts_entries(self) -> None:
        log = SimLogger()
        assert log.revision == 0
        log.log(SimLogger.COMBAT, "Mob spotted Elara! Dashing!")
        log.log(SimLogger.COMBAT, "Elara STUNNED! Fleeing...")
        assert log.revision == 2


class TestSinks:
    def test_flush_respects_verbosity(self, tmp_path) -> None:
        path = tmp_path / "sim.log"
        log = SimLogger(verbosity=1, log_file=str(path))
        log.log(SimLogger.COMBAT, "Elara STUNNED! Fleeing...", [2], time=3.5, day=1)
        log.log(SimLogger.COMMAND, "Need herbs.", [2], time=4.0, day=1)
        log.close()

        text = path.read_text(encoding="utf-8")
        assert "Elara STUNNED! Fleeing..." in text
        assert "Need herbs." not in text

    def test_stdout(self, capsys) -> None:
        log = SimLogger(verbosity=3, stdout=True)
        log.log(SimLogger.COMMAND, "Select resource.", day=2)
        log.flush()
        assert "Select resource." in capsys.readouterr().out

    def test_export_json(self, tmp_path) -> None:
        log = SimLogger()
        log.log(SimLogger.HARVEST, "Haldor got wood.", [1], time=12.25, day=1, amount=12)
        log.flush()
        log.log(SimLogger.FIRE, "Fire lit.", [1], time=20.0, day=1)
        path = tmp_path / "out" / "events.json"
        log.export_json(str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert [d["message"] for d in data] == ["Haldor got wood.", "Fire lit."]
        assert data[0]["data"] == {"amount": 12}
        assert data[0]["meeple_ids"] == [1]


class TestNarrative:
    def test_quiet_day(self) -> None:
        assert SimLogger().get_narrative(3) == "Day 3: Nothing notable happened."

    def test_day_lines(self) -> None:
        log = SimLogger()
        log.log(SimLogger.FIRE, "Fire lit.", day=1)
        log.log(SimLogger.FIRE, "Moving to fire...", day=2)
        text = log.get_narrative(1)
        assert "Fire lit." in text
        assert "Moving to fire..." not in text
