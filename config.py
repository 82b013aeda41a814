"""Configuration settings for the Meditation Timer application."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).parent

# Supabase Configuration (auth + session storage)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
SESSIONS_TABLE = "meditation_sessions"

# Timer settings
DEFAULT_DURATION_MINUTES = 20
MIN_DURATION_MINUTES = 5
MAX_DURATION_MINUTES = 180
TICK_INTERVAL_SECONDS = 1
INTERVAL_CUE_SECONDS = 600  # One bell every 10 minutes

# Cue names
CUE_START = "start"
CUE_INTERVAL = "interval"
CUE_END = "end"
CUE_NAMES = (CUE_START, CUE_INTERVAL, CUE_END)

# Cue sequences
START_CUE_COUNT = 3
INTERVAL_CUE_COUNT = 1
END_CUE_COUNT = 3
CUE_SPACING_SECONDS = 1.5

# Prerecorded bells, tried in this order of format
SOUNDS_DIR = Path(os.getenv("MEDITATION_SOUNDS_DIR", BASE_DIR / "data" / "sounds"))
CUE_FORMATS = ("wav", "mp3")

# Synthesized fallback bell
TONE_FREQUENCY_HZ = 440
TONE_PEAK_AMPLITUDE = 0.5
TONE_ATTACK_SECONDS = 0.1
TONE_DURATION_SECONDS = 1.0
TONE_SAMPLE_RATE = 44100

# Statistics
AVERAGE_MIN_SESSION_MINUTES = 5  # Shorter sessions don't count toward the average
STATS_REFRESH_SECONDS = 30

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
