"""Tests for reading audit logs back."""

from linesplit.audit.auditor import audit
from linesplit.audit.log_parser import AuditLogParser, LogCorruption, LoggedEvent, summarize_log
from linesplit.audit.models import AuditOutcome


def _write_log(tmp_path, text: str):
    path = tmp_path / "audit.log"
    path.write_text(text, encoding="utf-8")
    return path


class TestParsing:
    def test_round_trip_from_auditor(self, tmp_path, write_file):
        original = write_file("a.txt", "one\ntwo\nthree\n")
        recon = write_file("b.txt", "one\nthree\nfour\n")
        result = audit(original, recon, tmp_path / "audit.log")

        summary = summarize_log(tmp_path / "audit.log")
        assert not summary.is_corrupt
        assert summary.error_count == result.error_count
        assert summary.counts == result.counts

    def test_event_fields(self, tmp_path):
        log = _write_log(
            tmp_path,
            'MATCH: a=1 b=1 "x"\n'
            'MISMATCH: a=2 b=2 "has != inside" != "other"\n'
            'MISSING_IN_ORIGINAL: a=- b=3 "extra"\n'
            'MISSING_IN_RECONSTRUCTED: a=3 b=- "gone"\n'
            "# errors=3 events=4\n",
        )
        items = list(AuditLogParser(log).parse())
        events = [i for i in items if isinstance(i, LoggedEvent)]
        assert len(events) == 4
        assert events[1].a_text == "has != inside"
        assert events[1].b_text == "other"
        assert events[2].a_line is None and events[2].b_text == "extra"
        assert events[3].a_text == "gone" and events[3].b_line is None
        assert not [i for i in items if isinstance(i, LogCorruption)]


class TestCorruption:
    def test_missing_trailer_is_truncated(self, tmp_path):
        log = _write_log(tmp_path, 'MATCH: a=1 b=1 "x"\n')
        summary = summarize_log(log)
        assert [p.reason for p in summary.problems] == ["truncated"]
        assert summary.counts[AuditOutcome.MATCH] == 1

    def test_garbage_line(self, tmp_path):
        log = _write_log(tmp_path, 'MATCH: a=1 b=1 "x"\nnot a log line\n# errors=0 events=1\n')
        summary = summarize_log(log)
        assert [p.reason for p in summary.problems] == ["unparseable"]
        assert summary.problems[0].line_no == 2

    def test_unknown_outcome(self, tmp_path):
        log = _write_log(tmp_path, 'SIMILAR: a=1 b=1 "x"\n# errors=0 events=0\n')
        summary = summarize_log(log)
        assert summary.problems[0].reason == "unknown_outcome"

    def test_trailer_disagrees(self, tmp_path):
        log = _write_log(tmp_path, 'MATCH: a=1 b=1 "x"\n# errors=2 events=1\n')
        summary = summarize_log(log)
        assert [p.reason for p in summary.problems] == ["trailer_mismatch"]

    def test_cut_in_the_middle_of_a_line(self, tmp_path):
        log = _write_log(tmp_path, 'MATCH: a=1 b=1 "x"\nMISMATCH: a=2 b=2 "y" != "z')
        reasons = [p.reason for p in summarize_log(log).problems]
        assert reasons == ["unparseable", "truncated"]

    def test_empty_vs_empty_mismatch_not_an_error(self, tmp_path):
        log = _write_log(tmp_path, 'MISMATCH: a=1 b=1 "" != ""\n# errors=0 events=1\n')
        summary = summarize_log(log)
        assert summary.error_count == 0
        assert not summary.is_corrupt
