"""Tests for capcheck.caption_parser."""

from datetime import timedelta

import pytest

from capcheck.caption_parser import (
    SRT,
    VTT,
    advance,
    finalize_block,
    format_for_path,
    initial_state,
    is_valid_file_type,
    parse_caption_file,
    parse_captions,
)
from capcheck.exceptions import CaptionParseError, InvalidDigitsError, UnsupportedFormatError
from capcheck.models import CaptionEntry

from conftest import SAMPLE_SRT, SAMPLE_VTT, entry


class TestParseSRT:

    def test_two_blocks(self):
        captions = parse_captions(SAMPLE_SRT, SRT)
        assert captions == [entry(1, 4, "Hello world"), entry(5, 8, "Second line")]

    def test_no_trailing_blank_line(self):
        captions = parse_captions(SAMPLE_SRT.rstrip("\n"), SRT)
        assert len(captions) == 2
        assert captions[1].text == "Second line"

    def test_multiline_text_joined_with_space(self):
        content = '1\n00:00:01,000 --> 00:00:04,000\nHello @world! #test <b>HTML</b> "quotes"\nLine 2'
        captions = parse_captions(content, SRT)
        assert len(captions) == 1
        assert captions[0].text == 'Hello @world! #test <b>HTML</b> "quotes" Line 2'

    def test_windows_line_endings(self):
        content = "1\r\n00:00:01,000 --> 00:00:04,000\r\nHello world\r\n\r\n2\r\n00:00:05,000 --> 00:00:08,000\r\nAnother caption\r\n"
        captions = parse_captions(content, SRT)
        assert [c.text for c in captions] == ["Hello world", "Another caption"]
        assert captions[1].end == timedelta(seconds=8)

    def test_extra_spaces_around_arrow(self):
        captions = parse_captions("1\n00:00:01,000    -->    00:00:04,000\nHello world", SRT)
        assert captions[0].start == timedelta(seconds=1)
        assert captions[0].end == timedelta(seconds=4)

    def test_lines_are_trimmed(self):
        captions = parse_captions("1\n  00:00:01,000 --> 00:00:02,000  \n   padded text\t\n", SRT)
        assert captions == [entry(1, 2, "padded text")]

    def test_sequence_line_content_is_not_checked(self):
        captions = parse_captions("not-a-number\n00:00:01,000 --> 00:00:02,000\nText", SRT)
        assert captions == [entry(1, 2, "Text")]

    def test_timing_without_arrow_is_text(self):
        captions = parse_captions("1\n00:00:01-00:00:04\nHello", SRT)
        assert len(captions) == 1
        assert captions[0].text == "00:00:01-00:00:04 Hello"
        assert captions[0].start == timedelta(0)
        assert captions[0].end == timedelta(0)

    def test_arrow_without_whitespace_is_text(self):
        captions = parse_captions("1\n00:00:01,000-->00:00:04,000\nHello", SRT)
        assert captions[0].text == "00:00:01,000-->00:00:04,000 Hello"

    def test_vtt_style_timing_is_text_in_srt(self):
        captions = parse_captions("1\n00:00:01.000 --> 00:00:04.000\nHello", SRT)
        assert captions[0].text == "00:00:01.000 --> 00:00:04.000 Hello"

    def test_block_without_timing_reuses_previous_timing(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nFirst\n\n2\nOrphan text\n"
        captions = parse_captions(content, SRT)
        assert captions == [entry(1, 2, "First"), entry(1, 2, "Orphan text")]

    def test_block_without_text_is_dropped(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\n\n2\n00:00:03,000 --> 00:00:04,000\nKept\n"
        assert parse_captions(content, SRT) == [entry(3, 4, "Kept")]

    def test_later_timing_line_in_block_replaces_earlier(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\n00:00:03,000 --> 00:00:04,000\nHi"
        assert parse_captions(content, SRT) == [entry(3, 4, "Hi")]

    def test_only_ascii_whitespace_is_trimmed(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\n\x1fSeparated\x1c\n \t\vPlain\f\r\n"
        assert parse_captions(content, SRT) == [entry(1, 2, "\x1fSeparated\x1c Plain")]

    def test_control_separator_line_is_not_blank(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nA\n\x1e\nB\n"
        assert parse_captions(content, SRT) == [entry(1, 2, "A \x1e B")]

    def test_timing_lines_are_logged(self, caplog):
        with caplog.at_level("DEBUG", logger="capcheck.caption_parser"):
            parse_captions(SAMPLE_SRT, SRT)
        assert "00:00:01,000 --> 00:00:04,000" in caplog.text

    def test_inverted_timing_is_kept(self):
        captions = parse_captions("1\n00:00:05,000 --> 00:00:02,000\nBackwards", SRT)
        assert captions == [entry(5, 2, "Backwards")]

    def test_consecutive_blank_lines(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nA\n\n\n\n2\n00:00:03,000 --> 00:00:04,000\nB"
        assert [c.text for c in parse_captions(content, SRT)] == ["A", "B"]

    def test_large_file(self):
        blocks = []
        for i in range(1, 1001):
            blocks.append(f"{i}\n00:00:{i:02d},000 --> 00:00:{i + 1:02d},500\nCaption number {i}\n")
        captions = parse_captions("\n".join(blocks), SRT)
        assert len(captions) == 1000
        assert captions[0].text == "Caption number 1"
        # Three-digit seconds no longer look like a timing line
        assert captions[999].text == "00:00:1000,000 --> 00:00:1001,500 Caption number 1000"

    def test_empty_input(self):
        assert parse_captions("", SRT) == []
        assert parse_captions("\n\n\n", SRT) == []


class TestParseVTT:

    def test_header_and_note_skipped(self):
        assert parse_captions(SAMPLE_VTT, VTT) == [entry(1, 4, "Hello world"), entry(5, 8, "Second line")]

    def test_header_with_description(self):
        content = "WEBVTT - Some title\n\n00:00:01.000 --> 00:00:02.000\nHi"
        assert parse_captions(content, VTT) == [entry(1, 2, "Hi")]

    def test_cue_settings_are_ignored(self):
        content = "WEBVTT\n\n00:00:01.000 --> 00:00:02.500 align:start position:10%\nStyled"
        assert parse_captions(content, VTT) == [CaptionEntry(timedelta(seconds=1), timedelta(milliseconds=2500), "Styled")]

    def test_cue_identifier_becomes_text(self):
        content = "WEBVTT\n\nintro\n00:00:01.000 --> 00:00:02.000\nHello"
        assert parse_captions(content, VTT)[0].text == "intro Hello"

    def test_note_after_header_is_text(self):
        content = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHello\n\nNOTE late comment\n"
        captions = parse_captions(content, VTT)
        assert [c.text for c in captions] == ["Hello", "NOTE late comment"]

    def test_first_line_after_blank_may_be_timing(self):
        content = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nA\n\n00:00:03.000 --> 00:00:04.000\nB\n"
        assert parse_captions(content, VTT) == [entry(1, 2, "A"), entry(3, 4, "B")]

    def test_srt_style_timing_is_text_in_vtt(self):
        content = "WEBVTT\n\n00:00:01,000 --> 00:00:02,000\nHello"
        assert parse_captions(content, VTT)[0].text == "00:00:01,000 --> 00:00:02,000 Hello"

    def test_without_header(self):
        content = "00:00:01.000 --> 00:00:02.000\nNo header"
        assert parse_captions(content, VTT) == [entry(1, 2, "No header")]

    def test_only_header(self):
        assert parse_captions("WEBVTT\n\nNOTE nothing here\n", VTT) == []


class TestScannerSteps:

    def test_initial_states(self):
        assert initial_state(SRT).expecting_sequence is True
        assert initial_state(SRT).in_header is False
        assert initial_state(VTT).expecting_sequence is False
        assert initial_state(VTT).in_header is True

    def test_blank_line_finalizes_block(self):
        state = initial_state(SRT)
        for line in ["1", "00:00:01,000 --> 00:00:02,000", "one", "two"]:
            state, emitted = advance(state, line, SRT)
            assert emitted is None
        state, emitted = advance(state, "", SRT)
        assert emitted == entry(1, 2, "one two")
        assert state.text_lines == ()
        assert state.expecting_sequence is True

    def test_advance_does_not_mutate_input_state(self):
        before = initial_state(VTT)._replace(in_header=False)
        after, _ = advance(before, "some text", VTT)
        assert before.text_lines == ()
        assert after.text_lines == ("some text",)

    def test_finalize_empty_block(self):
        assert finalize_block(initial_state(SRT)) is None


class TestTimingErrors:

    def test_bad_start_time_aborts(self, monkeypatch):
        import capcheck.caption_parser as caption_parser

        def failing(time_str, fmt):
            raise InvalidDigitsError("invalid syntax")

        monkeypatch.setattr(caption_parser, "parse_timestamp", failing)
        with pytest.raises(CaptionParseError, match="error parsing start time") as exc_info:
            parse_captions(SAMPLE_SRT, SRT)
        assert isinstance(exc_info.value.__cause__, InvalidDigitsError)

    def test_bad_end_time_aborts(self, monkeypatch):
        import capcheck.caption_parser as caption_parser
        real = caption_parser.parse_timestamp
        calls = []

        def fail_second(time_str, fmt):
            calls.append(time_str)
            if len(calls) == 2:
                raise InvalidDigitsError("invalid syntax")
            return real(time_str, fmt)

        monkeypatch.setattr(caption_parser, "parse_timestamp", fail_second)
        with pytest.raises(CaptionParseError, match="error parsing end time"):
            parse_captions(SAMPLE_SRT, SRT)


class TestFileSelection:

    @pytest.mark.parametrize("path,expected", [
        ("captions.vtt", True),
        ("captions.srt", True),
        ("captions.VTT", True),
        ("captions.SRT", True),
        ("/path/to/captions.vtt", True),
        ("captions.txt", False),
        ("captions", False),
        ("captions.vtt.backup", False),
        ("", False),
    ])
    def test_is_valid_file_type(self, path, expected):
        assert is_valid_file_type(path) is expected

    def test_format_for_path(self):
        assert format_for_path("a.SRT") is SRT
        assert format_for_path("dir/b.vtt") is VTT

    def test_format_for_unsupported_path(self):
        with pytest.raises(UnsupportedFormatError):
            format_for_path("subs.ass")


class TestParseCaptionFile:

    def test_srt_file(self, srt_file):
        assert parse_caption_file(str(srt_file)) == [entry(1, 4, "Hello world"), entry(5, 8, "Second line")]

    def test_vtt_file(self, vtt_file):
        assert len(parse_caption_file(str(vtt_file))) == 2

    def test_byte_order_mark_is_dropped(self, tmp_path):
        path = tmp_path / "bom.vtt"
        path.write_bytes(b"\xef\xbb\xbfWEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi\n")
        assert parse_caption_file(str(path)) == [entry(1, 2, "Hi")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CaptionParseError, match="could not read"):
            parse_caption_file(str(tmp_path / "missing.srt"))
