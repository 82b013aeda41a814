"""
Unit tests for bell asset loading and platform playback.
"""

import subprocess
from unittest.mock import patch

import numpy as np

import config
from audio import playback
from audio.assets import FileAssetLoader, load_cue_asset
from audio.playback import AudioOutput, get_audio_output
from audio.tone import encode_wav


def test_file_loader_reads_existing_file(tmp_path):
    (tmp_path / "start.wav").write_bytes(b"RIFF....")
    loader = FileAssetLoader(tmp_path)

    assert loader.fetch_audio_asset("start.wav") == b"RIFF...."
    assert loader.fetch_audio_asset("end.wav") is None


def test_load_cue_asset_from_directory(tmp_path):
    wav = encode_wav(np.zeros(10))
    (tmp_path / "interval.wav").write_bytes(wav)
    (tmp_path / "end.mp3").write_bytes(b"ID3")
    loader = FileAssetLoader(tmp_path)

    assert load_cue_asset(loader, config.CUE_INTERVAL) == (wav, "wav")
    assert load_cue_asset(loader, config.CUE_END) == (b"ID3", "mp3")
    assert load_cue_asset(loader, config.CUE_START) is None


def test_empty_file_is_skipped(tmp_path):
    (tmp_path / "start.wav").write_bytes(b"")
    (tmp_path / "start.mp3").write_bytes(b"")

    assert load_cue_asset(FileAssetLoader(tmp_path), config.CUE_START) is None


def test_play_writes_clip_once(tmp_path):
    output = AudioOutput(cache_dir=tmp_path)

    with patch.object(playback.sys, "platform", "darwin"), \
            patch.object(playback.subprocess, "Popen") as popen:
        assert output.play(b"clip", "wav")
        assert output.play(b"clip", "wav")

    assert popen.call_count == 2
    assert len(list(tmp_path.iterdir())) == 1
    assert popen.call_args[0][0][-1].endswith(".wav")


def test_play_falls_back_to_next_player(tmp_path):
    output = AudioOutput(cache_dir=tmp_path)

    with patch.object(playback.sys, "platform", "linux"), \
            patch.object(playback.subprocess, "Popen", side_effect=[FileNotFoundError, None]) as popen:
        assert output.play(b"clip", "mp3")

    commands = [call[0][0][0] for call in popen.call_args_list]
    assert commands == ["mpg123", "ffplay"]


def test_play_without_any_player_returns_false(tmp_path):
    output = AudioOutput(cache_dir=tmp_path)

    with patch.object(playback.sys, "platform", "linux"), \
            patch.object(playback.subprocess, "Popen", side_effect=FileNotFoundError):
        assert not output.play(b"clip", "wav")


def test_player_commands_per_platform(tmp_path):
    output = AudioOutput(cache_dir=tmp_path)
    path = tmp_path / "bell.wav"

    with patch.object(playback.sys, "platform", "darwin"):
        assert output._player_commands(path, "wav") == [["afplay", str(path)]]

    with patch.object(playback.sys, "platform", "linux"):
        assert output._player_commands(path, "wav")[0] == ["aplay", "-q", str(path)]

    with patch.object(playback.sys, "platform", "win32"):
        command = output._player_commands(path, "wav")[0]
        assert command[0] == "powershell"
        assert "SoundPlayer" in command[2]


def test_audio_output_is_shared():
    assert get_audio_output() is get_audio_output()


def test_popen_receives_silenced_streams(tmp_path):
    output = AudioOutput(cache_dir=tmp_path)

    with patch.object(playback.sys, "platform", "darwin"), \
            patch.object(playback.subprocess, "Popen") as popen:
        output.play(b"clip", "wav")

    kwargs = popen.call_args[1]
    assert kwargs["stdout"] == subprocess.DEVNULL
    assert kwargs["stderr"] == subprocess.DEVNULL
