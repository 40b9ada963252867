"""Tests for capcheck.batch."""

import json
import os
from unittest.mock import patch

import pytest

from capcheck.batch import find_caption_files, run_batch

from conftest import SAMPLE_SRT, SAMPLE_VTT, StubDetector

ENDPOINT = "http://detector.test/lang"


@pytest.fixture
def caption_dir(tmp_path):
    (tmp_path / "b.srt").write_text(SAMPLE_SRT, encoding="utf-8")
    (tmp_path / "a.VTT").write_text(SAMPLE_VTT, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not captions", encoding="utf-8")
    nested = tmp_path / "season2"
    nested.mkdir()
    (nested / "c.srt").write_text("1\n00:00:00,000 --> 00:00:01,000\nShort\n", encoding="utf-8")
    return tmp_path


class TestFindCaptionFiles:

    def test_top_level_only(self, caption_dir):
        found = find_caption_files(str(caption_dir))
        assert [os.path.basename(p) for p in found] == ["a.VTT", "b.srt"]

    def test_recursive(self, caption_dir):
        assert len(find_caption_files(str(caption_dir), recursive=True)) == 3

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_caption_files(str(tmp_path / "absent"))

    def test_not_a_directory(self, tmp_path):
        path = tmp_path / "file.srt"
        path.write_text(SAMPLE_SRT, encoding="utf-8")
        with pytest.raises(ValueError):
            find_caption_files(str(path))


@pytest.mark.integration
class TestRunBatch:

    def run(self, argv, detector=None):
        with patch("capcheck.batch.HttpLanguageDetector", return_value=detector or StubDetector("en-US")):
            return run_batch(argv)

    def test_failures_carry_file(self, caption_dir, capsys):
        code = self.run(["-i", str(caption_dir), "-r", "--end", "10s", "--coverage", "0.5", "--endpoint", ENDPOINT])
        assert code == 0
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert len(lines) == 1
        assert lines[0]["type"] == "insufficient_coverage"
        assert lines[0]["file"].endswith("c.srt")

    def test_all_pass(self, caption_dir, capsys):
        code = self.run(["-i", str(caption_dir), "--end", "10s", "--coverage", "0.5", "--endpoint", ENDPOINT])
        assert code == 0
        assert capsys.readouterr().out == ""

    def test_empty_directory(self, tmp_path, capsys):
        assert self.run(["-i", str(tmp_path), "--end", "10s", "--endpoint", ENDPOINT]) == 1

    def test_missing_directory(self, tmp_path, capsys):
        assert self.run(["-i", str(tmp_path / "absent"), "--end", "10s", "--endpoint", ENDPOINT]) == 1

    def test_bad_flags(self, caption_dir, capsys):
        assert self.run(["-i", str(caption_dir), "--end", "10s"]) == 1
