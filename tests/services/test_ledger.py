import sys

import pytest

from howis.domain.outcome import Outcome
from howis.exceptions import LedgerError, LedgerLockedError
from howis.services.ledger import Ledger
from howis.services.source_resolver import TableSource


def test_open_creates_missing_file(tmp_path):
    path = tmp_path / "howis.txt"
    with Ledger.open(str(path)) as ledger:
        skip, counters = ledger.replay()
    assert path.exists()
    assert skip == set()
    assert counters.summary() == "0 good, 0 bad, 0 n/a, 0 error"


def test_open_fails_for_unreachable_path(tmp_path):
    with pytest.raises(LedgerError):
        Ledger.open(str(tmp_path / "missing-dir" / "howis.txt"))


def test_replay_counts_statuses_and_builds_skip_set(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(
        b"a.bin: good\n"
        b"b.bin: bad\r\n"
        b"c.bin: n/a\n"
        b"d.bin: error: missing source\n"
        b"e.bin: error: available\n"
        b"f.bin: weird\n"
    )
    with Ledger.open(str(path)) as ledger:
        skip, counters = ledger.replay()
    assert skip == {"a.bin", "b.bin", "c.bin", "d.bin", "e.bin", "f.bin"}
    assert (counters.good, counters.bad, counters.na, counters.error) == (1, 1, 1, 2)


def test_replay_ignores_malformed_lines(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(b"no separator here\n\ngood.bin: good\nname:good\n")
    with Ledger.open(str(path)) as ledger:
        skip, counters = ledger.replay()
    assert skip == {"good.bin"}
    assert counters.good == 1
    assert counters.summary() == "1 good, 0 bad, 0 n/a, 0 error"


def test_replay_splits_at_first_separator(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(b"x.bin: error: timeout: after 30s\n")
    with Ledger.open(str(path)) as ledger:
        skip, counters = ledger.replay()
    assert skip == {"x.bin"}
    assert counters.error == 1


def test_replay_discards_recorded_names_from_source(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(b"a.bin: good\n")
    source = TableSource({"a.bin": "ua", "b.bin": "ub"})
    with Ledger.open(str(path)) as ledger:
        ledger.replay(source)
    assert list(source.drain_remaining()) == [("b.bin", "ub")]


def test_append_writes_one_line_per_decision(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(b"old.bin: good\n")
    with Ledger.open(str(path)) as ledger:
        ledger.replay()
        ledger.append("a.bin", Outcome.good())
        ledger.append("b.bin", Outcome.error("available"))
        ledger.append("c.bin", Outcome.not_available())
    assert path.read_bytes() == (
        b"old.bin: good\n"
        b"a.bin: good\n"
        b"b.bin: error: available\n"
        b"c.bin: n/a\n"
    )


def test_append_after_partial_last_line_starts_a_new_line(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(b"a.bin: good\nb.bin: ba")
    with Ledger.open(str(path)) as ledger:
        skip, _ = ledger.replay()
        ledger.append("c.bin", Outcome.bad())
    assert "b.bin" in skip
    assert path.read_bytes().endswith(b"b.bin: ba\nc.bin: bad\n")


def test_appended_lines_replay_in_next_run(tmp_path):
    path = str(tmp_path / "howis.txt")
    with Ledger.open(path) as ledger:
        ledger.replay()
        ledger.append("é.bin", Outcome.bad())
    with Ledger.open(path) as ledger:
        skip, counters = ledger.replay()
    assert skip == {"é.bin"}
    assert counters.bad == 1


def test_invalid_utf8_is_a_ledger_error(tmp_path):
    path = tmp_path / "howis.txt"
    path.write_bytes(b"\xff\xfe: good\n")
    with Ledger.open(str(path)) as ledger:
        with pytest.raises(LedgerError):
            ledger.replay()


@pytest.mark.skipif(sys.platform == "win32", reason="flock semantics")
def test_second_open_is_refused_while_locked(tmp_path):
    path = str(tmp_path / "howis.txt")
    with Ledger.open(path):
        with pytest.raises(LedgerLockedError):
            Ledger.open(path)
    # released on close
    Ledger.open(path).close()


def test_closed_ledger_refuses_append(tmp_path):
    ledger = Ledger.open(str(tmp_path / "howis.txt"))
    ledger.close()
    with pytest.raises(LedgerError):
        ledger.append("a.bin", Outcome.good())


def test_append_keeps_multiline_error_on_one_line(tmp_path):
    path = str(tmp_path / "howis.txt")
    with Ledger.open(path) as ledger:
        ledger.replay()
        ledger.append("a.bin", Outcome.error("connection reset\r\nby peer\nretry later"))
        ledger.append("b.bin", Outcome.good())
    with open(path, "rb") as f:
        assert f.read() == b"a.bin: error: connection reset by peer retry later\nb.bin: good\n"
    with Ledger.open(path) as ledger:
        skip, counters = ledger.replay()
    assert skip == {"a.bin", "b.bin"}
    assert (counters.good, counters.error) == (1, 1)
