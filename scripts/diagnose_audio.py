#!/usr/bin/env python3
"""
Diagnostic script to check which bell each cue will use.

Run from Terminal: python scripts/diagnose_audio.py [--play]
"""

import sys
import time

sys.path.insert(0, '.')

import config
from audio import CuePlayer, SOURCE_ASSET


class ImmediateScheduler:
    """Runs callbacks right away, sleeping for the requested delay first."""

    def call_later(self, delay_seconds, callback):
        time.sleep(delay_seconds)
        callback()
        return None

    def cancel(self, handle):
        pass


def check_cues(player: CuePlayer) -> bool:
    """Resolve every cue and report where its sound comes from."""
    print("\n=== Resolving Cues ===")
    print(f"   Sounds directory: {config.SOUNDS_DIR}")

    all_assets = True
    for cue_name in config.CUE_NAMES:
        try:
            data, audio_format, source = player.resolve(cue_name)
        except Exception as e:
            print(f"❌ {cue_name}: {e}")
            all_assets = False
            continue

        if source == SOURCE_ASSET:
            print(f"✅ {cue_name}: {cue_name}.{audio_format} ({len(data)} bytes)")
        else:
            print(f"⚠️  {cue_name}: no recording found, using generated {config.TONE_FREQUENCY_HZ} Hz tone")
            all_assets = False

    return all_assets


def play_cues(player: CuePlayer) -> None:
    """Play one of each cue so you can hear them."""
    print("\n=== Playing Cues ===")
    for cue_name in config.CUE_NAMES:
        print(f"   🔔 {cue_name}")
        player.play_sequence(1, cue_name)
        time.sleep(config.CUE_SPACING_SECONDS)


def main():
    print("=" * 50)
    print("MEDITATION TIMER AUDIO DIAGNOSTIC")
    print("=" * 50)
    print(f"\nPlatform: {sys.platform}")
    print(f"Python: {sys.version.split()[0]}")

    player = CuePlayer(ImmediateScheduler())
    all_assets = check_cues(player)

    if "--play" in sys.argv:
        play_cues(player)

    print("\n" + "=" * 50)
    if all_assets:
        print("✅ All cues use recorded bells.")
    else:
        print("⚠️  Some cues fall back to the generated tone.")
        print(f"   Add start/interval/end .wav or .mp3 files to {config.SOUNDS_DIR}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
