"""
Resistor Calculator - Application Configuration
"""

import os

# Touchscreen display
SCREEN_W = 480
SCREEN_H = 320
FPS      = 30

# Band count shown at start-up (4, 5 or 6)
DEFAULT_BAND_COUNT = 4

# How long a freshly changed band stays highlighted (seconds)
HIGHLIGHT_SECONDS = 0.3

# Longest resistance string accepted from the keypad / keyboard
INPUT_MAX_CHARS = 12

# Advisory suggestion service.  Unset → offline E24 advisor.
SUGGEST_URL     = os.environ.get("RESISTOR_SUGGEST_URL", "")
CONNECT_TIMEOUT = 3.05   # seconds
READ_TIMEOUT    = 10     # seconds

# Logging
LOG_LEVEL = os.environ.get("RESISTOR_LOG_LEVEL", "INFO")
