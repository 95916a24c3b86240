"""Tests for postfeed.utils — timestamps, HTML stripping, truncation."""

from email.utils import format_datetime
from datetime import datetime, timezone, timedelta

from postfeed.utils import format_pub_date, parse_timestamp, sanitize_html, time_ago, trim_words, truncate


# ── time_ago ──────────────────────────────────────────────────────────────────


class TestTimeAgo:
    def test_none_returns_empty(self):
        assert time_ago(None) == ""

    def test_empty_string_returns_empty(self):
        assert time_ago("") == ""

    def test_bad_format_returns_empty(self):
        assert time_ago("not a date") == ""

    def test_just_now(self, monkeypatch):
        now = datetime.now(timezone.utc)
        published = format_datetime(now)
        monkeypatch.setattr("postfeed.utils.time.time", lambda: now.timestamp() + 30)
        assert time_ago(published) == "just now"

    def test_hours_ago(self, monkeypatch):
        now = datetime.now(timezone.utc)
        published = format_datetime(now)
        monkeypatch.setattr("postfeed.utils.time.time", lambda: now.timestamp() + 7200)
        assert time_ago(published) == "2h ago"

    def test_days_ago(self, monkeypatch):
        now = datetime.now(timezone.utc)
        published = format_datetime(now)
        monkeypatch.setattr("postfeed.utils.time.time", lambda: now.timestamp() + 172800)
        assert time_ago(published) == "2d ago"

    def test_reads_pub_date_format(self, monkeypatch):
        dt = datetime(2024, 3, 5, 9, 7, 2, tzinfo=timezone.utc)
        monkeypatch.setattr("postfeed.utils.time.time", lambda: dt.timestamp() + 300)
        assert time_ago(format_pub_date(dt)) == "5m ago"


# ── format_pub_date ───────────────────────────────────────────────────────────


class TestFormatPubDate:
    def test_fixed_utc_format(self):
        dt = datetime(2024, 3, 5, 9, 7, 2, tzinfo=timezone.utc)
        assert format_pub_date(dt) == "Tue, 05 Mar 2024 09:07:02 +0000"

    def test_converts_offset_to_utc(self):
        dt = datetime(2024, 3, 5, 11, 7, 2, tzinfo=timezone(timedelta(hours=2)))
        assert format_pub_date(dt) == "Tue, 05 Mar 2024 09:07:02 +0000"

    def test_naive_treated_as_utc(self):
        assert format_pub_date(datetime(2024, 12, 31, 23, 59, 59)) == "Tue, 31 Dec 2024 23:59:59 +0000"

    def test_none_is_empty(self):
        assert format_pub_date(None) == ""


# ── parse_timestamp ───────────────────────────────────────────────────────────


class TestParseTimestamp:
    def test_epoch_int(self):
        assert parse_timestamp(1700000000) == 1700000000.0

    def test_epoch_string(self):
        assert parse_timestamp(" 1700000000 ") == 1700000000.0

    def test_iso_with_offset(self):
        expected = datetime(2024, 1, 1, 12, tzinfo=timezone.utc).timestamp()
        assert parse_timestamp("2024-01-01T13:00:00+01:00") == expected

    def test_naive_iso_is_utc(self):
        expected = datetime(2024, 1, 1, 12, tzinfo=timezone.utc).timestamp()
        assert parse_timestamp("2024-01-01 12:00:00") == expected

    def test_rfc2822(self):
        expected = datetime(2024, 3, 5, 9, 7, 2, tzinfo=timezone.utc).timestamp()
        assert parse_timestamp("Tue, 05 Mar 2024 09:07:02 +0000") == expected

    def test_garbage_is_none(self):
        assert parse_timestamp("next tuesday") is None

    def test_empty_and_none(self):
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None

    def test_bool_is_not_a_timestamp(self):
        assert parse_timestamp(True) is None


# ── sanitize_html ─────────────────────────────────────────────────────────────


class TestSanitizeHtml:
    def test_none_returns_empty(self):
        assert sanitize_html(None) == ""

    def test_strips_tags(self):
        assert sanitize_html("<p>Hello <b>world</b></p>") == "Hello world"

    def test_decodes_entities(self):
        assert sanitize_html("Tom &amp; Jerry &#8217;s") == "Tom & Jerry ’s"

    def test_encoded_brackets_stay_as_text(self):
        assert sanitize_html("<p>1 &lt; 2</p>") == "1 < 2"

    def test_collapses_whitespace(self):
        assert sanitize_html("<p>a</p>\n\n<p>b</p>") == "a b"


# ── trim_words / truncate ─────────────────────────────────────────────────────


class TestTrimWords:
    def test_short_text_unchanged(self):
        assert trim_words("one two three", 5) == "one two three"

    def test_long_text_cut_with_marker(self):
        assert trim_words("one two three four", 2) == "one two […]"

    def test_exact_length_not_marked(self):
        assert trim_words("one two", 2) == "one two"


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("Hello", 200) == "Hello"

    def test_long_text_truncated(self):
        text = "word " * 100
        result = truncate(text.strip(), 50)
        assert len(result) <= 50
        assert result.endswith("…")
