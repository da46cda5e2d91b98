"""Tests for single-shot extraction jobs."""

from unittest.mock import MagicMock

import pytest

from scenecut.editors.extract import MediaExtractor, parse_timecode
from scenecut.errors import TranscodeError
from scenecut.workspace import Workspace


class TestParseTimecode:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("10", 10.0),
            ("2.5", 2.5),
            ("01:30", 90.0),
            ("00:00:10", 10.0),
            ("01:02:03.5", 3723.5),
            (" 00:00:20 ", 20.0),
            (7, 7.0),
            (1.25, 1.25),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_timecode(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "1:2:3:4", "00:75", "-5", -1.0, True])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_timecode(value)


@pytest.fixture
def transcoder():
    return MagicMock()


@pytest.fixture
def extractor(transcoder, tmp_path):
    return MediaExtractor(transcoder, Workspace(tmp_path))


class TestExtractAudio:
    def test_writes_wav_under_root(self, extractor, transcoder, tmp_path):
        out = extractor.extract_audio("/v/in.mp4")
        assert out.parent == tmp_path.resolve()
        assert out.name.startswith("audio_") and out.suffix == ".wav"
        transcoder.extract_audio.assert_called_once_with("/v/in.mp4", out)

    def test_failure_releases_reserved_name(self, extractor, transcoder, tmp_path):
        transcoder.extract_audio.side_effect = TranscodeError("ffmpeg failed (rc=1)")
        with pytest.raises(TranscodeError):
            extractor.extract_audio("/v/in.mp4")
        assert list(tmp_path.glob("audio_*.wav")) == []


class TestExtractFrames:
    def test_allocates_directory(self, extractor, transcoder):
        out_dir = extractor.extract_frames("/v/in.mp4", 1.0)
        assert out_dir.is_dir()
        assert out_dir.name.startswith("frames_")
        transcoder.extract_frames.assert_called_once_with("/v/in.mp4", 1.0, out_dir)

    def test_rejects_non_positive_fps(self, extractor, transcoder):
        with pytest.raises(ValueError, match="fps"):
            extractor.extract_frames("/v/in.mp4", 0)
        transcoder.extract_frames.assert_not_called()


class TestCreateClip:
    def test_cuts_window(self, extractor, transcoder):
        out = extractor.create_clip("/v/in.mp4", "00:00:10", "00:00:25.5")
        assert out.name.startswith("clip_") and out.suffix == ".mp4"
        transcoder.cut_clip.assert_called_once_with("/v/in.mp4", 10.0, 15.5, out)

    def test_end_before_start(self, extractor, transcoder):
        with pytest.raises(ValueError, match="after"):
            extractor.create_clip("/v/in.mp4", "20", "10")
        transcoder.cut_clip.assert_not_called()

    def test_failure_releases_reserved_name(self, extractor, transcoder, tmp_path):
        transcoder.cut_clip.side_effect = TranscodeError("ffmpeg failed (rc=1)")
        with pytest.raises(TranscodeError):
            extractor.create_clip("/v/in.mp4", "0", "5")
        assert list(tmp_path.glob("clip_*.mp4")) == []
