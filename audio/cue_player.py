"""Bell cues: resolve each cue to a sound once, then play spaced sequences."""

import logging
from typing import Dict, Optional, Tuple

import config
from audio.assets import AssetLoaderProtocol, FileAssetLoader, load_cue_asset
from audio.playback import AudioOutput, get_audio_output
from audio.tone import synthesize_bell
from tracking.scheduler import SchedulerProtocol

logger = logging.getLogger(__name__)

SOURCE_ASSET = "asset"
SOURCE_TONE = "tone"


class CuePlayer:
    """
    Plays start, interval and end bells.

    Each cue resolves to a prerecorded file (WAV first, then MP3) or,
    if neither loads, to the synthesized bell. Resolutions are cached
    for the lifetime of the process. Sequences are scheduled through
    the scheduler and never awaited.
    """

    def __init__(
        self,
        scheduler: SchedulerProtocol,
        asset_loader: Optional[AssetLoaderProtocol] = None,
        output: Optional[AudioOutput] = None,
        spacing_seconds: float = config.CUE_SPACING_SECONDS,
    ):
        self.scheduler = scheduler
        self.asset_loader = asset_loader or FileAssetLoader()
        self._output = output
        self.spacing_seconds = spacing_seconds

        # cue name -> (audio bytes, format, source)
        self._resolved: Dict[str, Tuple[bytes, str, str]] = {}
        self._tone: Optional[bytes] = None

    @property
    def output(self) -> AudioOutput:
        if self._output is None:
            self._output = get_audio_output()
        return self._output

    def preload(self) -> None:
        """Resolve every cue up front so the first bell plays without delay."""
        for cue_name in config.CUE_NAMES:
            self.resolve(cue_name)

    def resolve(self, cue_name: str) -> Tuple[bytes, str, str]:
        """
        Get the sound for a cue, loading it on first use.

        Args:
            cue_name: One of config.CUE_NAMES

        Returns:
            (audio bytes, format, source) where source is "asset" or "tone"
        """
        if cue_name not in config.CUE_NAMES:
            raise ValueError(f"Unknown cue: {cue_name!r}")

        cached = self._resolved.get(cue_name)
        if cached is not None:
            return cached

        asset = load_cue_asset(self.asset_loader, cue_name)
        if asset is not None:
            data, audio_format = asset
            resolved = (data, audio_format, SOURCE_ASSET)
            logger.debug(f"Loaded {cue_name} bell ({audio_format})")
        else:
            logger.warning(f"Could not load {cue_name} sound, falling back to generated tone")
            resolved = (self._get_tone(), "wav", SOURCE_TONE)

        self._resolved[cue_name] = resolved
        return resolved

    def _get_tone(self) -> bytes:
        if self._tone is None:
            self._tone = synthesize_bell()
        return self._tone

    def play(self, cue_name: str) -> None:
        """Play a single cue now. Failures are logged, never raised."""
        try:
            data, audio_format, _ = self.resolve(cue_name)
            self.output.play(data, audio_format)
        except ValueError:
            raise
        except Exception as e:
            logger.warning(f"Bell playback failed ({cue_name}): {e}")

    def play_sequence(self, count: int, cue_name: str = config.CUE_INTERVAL) -> None:
        """
        Schedule `count` bells spaced `spacing_seconds` apart.

        Returns immediately; the first bell is scheduled with no delay.
        """
        if count < 0:
            raise ValueError("Bell count cannot be negative")
        if cue_name not in config.CUE_NAMES:
            raise ValueError(f"Unknown cue: {cue_name!r}")

        for i in range(count):
            self.scheduler.call_later(i * self.spacing_seconds, lambda: self.play(cue_name))

        logger.debug(f"Scheduled {count} {cue_name} bell(s)")
