import logging

from shieldsim.combat.log import ActionLog, LogCategory


def test_entries_are_newest_first():
    log = ActionLog()
    log.add("one", "info")
    log.add("two", LogCategory.ATTACK)
    assert [e.message for e in log.entries()] == ["two", "one"]
    assert log.entries()[0].category is LogCategory.ATTACK


def test_freeze_and_restore_keep_entries_identical():
    log = ActionLog()
    first = log.add("one", "info")
    frozen = log.freeze()
    log.add("two", "heal")
    log.restore(frozen)
    assert log.entries() == [first]
    assert log.entries()[0].timestamp == first.timestamp


def test_ids_are_unique():
    log = ActionLog()
    ids = {log.add(str(i), "info").id for i in range(10)}
    assert len(ids) == 10


def test_defeat_is_forwarded_at_info(caplog):
    log = ActionLog()
    with caplog.at_level(logging.INFO, logger="shieldsim.combat.log"):
        log.add("DEFEATED!", LogCategory.DEFEATED)
        log.add("quiet", LogCategory.HEAL)
    assert "DEFEATED!" in caplog.text
    assert "quiet" not in caplog.text


def test_to_text_renders_timestamps():
    log = ActionLog()
    log.add("first", "info")
    log.add("second", "attack")
    lines = log.to_text().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("] second")
    assert lines[1].startswith("[")


def test_simulator_log_helpers(heavy):
    heavy.add_log("Note", LogCategory.SUCCESS)
    assert heavy.logs[0].message == "Note"
    assert "Note" in heavy.export_log()
    heavy.clear_logs()
    assert heavy.logs == []
    # clearing the log is not an undoable command
    assert heavy.history_size == 1
