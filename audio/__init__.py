"""
Audio cues for the meditation timer.
"""

from audio.cue_player import CuePlayer, SOURCE_ASSET, SOURCE_TONE
from audio.assets import FileAssetLoader
from audio.playback import AudioOutput, get_audio_output

__all__ = [
    "CuePlayer",
    "FileAssetLoader",
    "AudioOutput",
    "get_audio_output",
    "SOURCE_ASSET",
    "SOURCE_TONE",
]
