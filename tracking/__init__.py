"""
Countdown, session lifecycle and statistics for the meditation timer.
"""
