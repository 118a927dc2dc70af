"""
pytest configuration for the resistor calculator tests.
- Runs pygame in headless/dummy mode (no physical display required).
- Adds the project root to sys.path so the flat modules import directly.
"""
import os
import sys

# Headless SDL; must be set before pygame is imported
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
