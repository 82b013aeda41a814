"""Synthesized bell used when no prerecorded cue is available."""

import io
import wave

import numpy as np

import config


def build_bell_samples(
    frequency: float = config.TONE_FREQUENCY_HZ,
    peak: float = config.TONE_PEAK_AMPLITUDE,
    attack_seconds: float = config.TONE_ATTACK_SECONDS,
    duration_seconds: float = config.TONE_DURATION_SECONDS,
    sample_rate: int = config.TONE_SAMPLE_RATE,
) -> np.ndarray:
    """
    Build a sine bell with a linear attack/release envelope.

    The gain ramps from silence to `peak` over `attack_seconds`, then
    back down to silence at `duration_seconds`.

    Args:
        frequency: Tone frequency in Hz
        peak: Peak amplitude (0-1)
        attack_seconds: Time to reach peak amplitude
        duration_seconds: Total tone length
        sample_rate: Samples per second

    Returns:
        Float samples in [-1, 1]
    """
    sample_count = int(sample_rate * duration_seconds)
    t = np.arange(sample_count) / sample_rate

    envelope = np.interp(
        t,
        [0.0, attack_seconds, duration_seconds],
        [0.0, peak, 0.0],
    )
    return envelope * np.sin(2 * np.pi * frequency * t)


def encode_wav(samples: np.ndarray, sample_rate: int = config.TONE_SAMPLE_RATE) -> bytes:
    """Encode float samples as 16-bit mono WAV bytes."""
    pcm = np.int16(np.clip(samples, -1.0, 1.0) * 32767)

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm.tobytes())
    return buffer.getvalue()


def synthesize_bell() -> bytes:
    """Return the fallback bell as ready-to-play WAV bytes."""
    return encode_wav(build_bell_samples())
