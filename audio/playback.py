"""
Platform audio output.

Bells are written once to a temporary directory and handed to the
platform's command-line player, so playback never blocks the caller:
- macOS: afplay
- Windows: PowerShell (SoundPlayer for WAV, MediaPlayer for MP3)
- Linux: aplay for WAV, mpg123 for MP3, ffplay as a last resort
"""

import hashlib
import logging
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class AudioOutput:
    """Fire-and-forget playback through the system audio device."""

    def __init__(self, cache_dir: Optional[Path] = None):
        self._cache_dir = cache_dir
        self._files: Dict[str, Path] = {}

    def _get_cache_dir(self) -> Path:
        if self._cache_dir is None:
            self._cache_dir = Path(tempfile.mkdtemp(prefix="meditation_bells_"))
        return self._cache_dir

    def _materialize(self, data: bytes, audio_format: str) -> Path:
        """Write the clip to disk once and reuse the file afterwards."""
        digest = hashlib.sha1(data).hexdigest()[:16]
        key = f"{digest}.{audio_format}"
        path = self._files.get(key)
        if path is None or not path.exists():
            path = self._get_cache_dir() / key
            path.write_bytes(data)
            self._files[key] = path
        return path

    def _player_commands(self, path: Path, audio_format: str) -> List[List[str]]:
        if sys.platform == "darwin":
            return [["afplay", str(path)]]

        if sys.platform == "win32":
            if audio_format == "wav":
                script = f'(New-Object Media.SoundPlayer "{path}").PlaySync()'
            else:
                script = (
                    "Add-Type -AssemblyName presentationCore; "
                    "$p = New-Object System.Windows.Media.MediaPlayer; "
                    f'$p.Open([uri]"{path}"); $p.Play(); Start-Sleep -Seconds 5'
                )
            return [["powershell", "-c", script]]

        primary = ["aplay", "-q", str(path)] if audio_format == "wav" else ["mpg123", "-q", str(path)]
        return [primary, ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", str(path)]]

    def play(self, data: bytes, audio_format: str) -> bool:
        """
        Start playing a clip without waiting for it to finish.

        Args:
            data: Encoded audio (WAV or MP3 bytes)
            audio_format: "wav" or "mp3"

        Returns:
            True if a player process was launched
        """
        try:
            path = self._materialize(data, audio_format)
        except OSError as e:
            logger.warning(f"Could not write bell to disk: {e}")
            return False

        kwargs = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        for command in self._player_commands(path, audio_format):
            try:
                subprocess.Popen(command, **kwargs)
                return True
            except FileNotFoundError:
                logger.debug(f"Audio player not found: {command[0]}")
            except OSError as e:
                logger.debug(f"Sound playback error: {e}")

        logger.warning("No audio player available - bell skipped")
        return False


# Process-wide output, created on first use
_audio_output: Optional[AudioOutput] = None


def get_audio_output() -> AudioOutput:
    """Get the shared audio output, creating it lazily."""
    global _audio_output
    if _audio_output is None:
        _audio_output = AudioOutput()
    return _audio_output
