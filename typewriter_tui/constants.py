"""
Typewriter - Shared Constants

Central location for defaults and timing used across the package.
"""

# =============================================================================
# ANIMATION DEFAULTS
# =============================================================================
# All durations are milliseconds.

DEFAULT_DELAY_MS = 100        # Nominal wait between two ticks
DEFAULT_FLUCTUATION_MS = 50   # Random +/- jitter added to each wait

# =============================================================================
# TIMING
# =============================================================================

FRAME_RATE = 60                        # Frames per second of the frame clock
FRAME_INTERVAL_MS = 1000 / FRAME_RATE  # ~16.7ms between frame callbacks

# =============================================================================
# DISPLAY
# =============================================================================

CARET = "▌"                 # Shown after the typed text
CARET_BLINK_INTERVAL = 0.5  # Seconds between caret on/off

# Environment switches (see config.options_from_env)
ENV_DEBUG = "TYPEWRITER_DEBUG"
ENV_DELAY = "TYPEWRITER_DELAY"
ENV_FLUCTUATION = "TYPEWRITER_FLUCTUATION"
