"""Loading of prerecorded bell recordings."""

import io
import logging
import wave
from pathlib import Path
from typing import Optional, Protocol, Tuple

import config

logger = logging.getLogger(__name__)


class AssetLoaderProtocol(Protocol):
    """Anything that can fetch raw audio bytes by file name."""

    def fetch_audio_asset(self, name: str) -> Optional[bytes]:
        """
        Fetch a recording.

        Args:
            name: File name, e.g. "start.wav"

        Returns:
            Raw file bytes, or None if the asset does not exist
        """
        ...


class FileAssetLoader:
    """Reads bell recordings from a directory on disk."""

    def __init__(self, sounds_dir: Optional[Path] = None):
        self.sounds_dir = Path(sounds_dir or config.SOUNDS_DIR)

    def fetch_audio_asset(self, name: str) -> Optional[bytes]:
        path = self.sounds_dir / name
        if not path.is_file():
            return None
        return path.read_bytes()


def _is_playable(data: bytes, audio_format: str) -> bool:
    """Cheap sanity check so a corrupt file falls through to the next format."""
    if not data:
        return False
    if audio_format == "wav":
        try:
            with wave.open(io.BytesIO(data), "rb") as wav_file:
                return wav_file.getnframes() > 0
        except (wave.Error, EOFError):
            return False
    return True


def load_cue_asset(
    loader: AssetLoaderProtocol,
    cue_name: str,
    formats: Tuple[str, ...] = config.CUE_FORMATS,
) -> Optional[Tuple[bytes, str]]:
    """
    Resolve a cue recording through the format fallback chain.

    Args:
        loader: Asset loader to query
        cue_name: One of config.CUE_NAMES
        formats: File extensions to try, in order

    Returns:
        (bytes, format) for the first usable recording, or None
    """
    for audio_format in formats:
        name = f"{cue_name}.{audio_format}"
        try:
            data = loader.fetch_audio_asset(name)
        except Exception as e:
            logger.warning(f"Could not load {name}: {e}")
            continue

        if data is None:
            logger.debug(f"No {name} available")
            continue
        if not _is_playable(data, audio_format):
            logger.warning(f"Ignoring unreadable audio file: {name}")
            continue

        return data, audio_format

    return None
