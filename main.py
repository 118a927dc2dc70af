"""
Resistor Calculator - Main Entry Point

Builds the shared ResistorCalculator, the advisory dispatcher and the Pygame
UI, then runs the main event loop.

The advisor is chosen from config: a remote suggestion service when
RESISTOR_SUGGEST_URL is set, otherwise the offline E24 advisor.  Advisor
failures are logged and never interrupt the UI.
"""

import logging
import sys
import time

import pygame

import config
from advisory import make_advisor
from calculator import ResistorCalculator
from screen_calculator import ScreenCalculator
from screen_chart import ScreenChart
from ui_manager import UIManager

log = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )

    calculator = ResistorCalculator(
        band_count=config.DEFAULT_BAND_COUNT,
        advisor=make_advisor(),
    )

    mgr = UIManager()
    mgr.register_screen("calculator", ScreenCalculator(mgr, calculator))
    mgr.register_screen("chart",      ScreenChart(mgr))
    mgr.switch_to("calculator")

    log.info("Resistor Calculator started (%d bands)", calculator.band_count)

    last_t = time.monotonic()
    try:
        running = True
        while running:
            now = time.monotonic()
            dt = now - last_t
            last_t = now

            running = mgr.handle_events()
            mgr.update(dt)
            mgr.draw()
    finally:
        calculator.close()
        pygame.quit()
        log.info("Pygame quit")


if __name__ == "__main__":
    main()
