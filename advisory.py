"""
Resistor Calculator - Advisory Suggestions for Unusual Values

When the user types a resistance, an advisor may offer free-text guidance
such as "4.8 kΩ is not a standard value; change the 2nd band to Violet for
4.7 kΩ".  The calculator never depends on the answer: requests run on a
background thread and only the newest one is delivered.

Two advisors share the ``suggest(resistance) -> str`` contract:

  SuggestionClient  – POSTs {"resistance": <ohms>} as JSON to a remote
                      service and reads {"suggestion": <text>} back.
  E24Advisor        – offline fallback; compares the value with the nearest
                      E24 standard value.

Failures raise SuggestionError, which SuggestionDispatcher logs and hands to
its error callback, or delivers as an empty suggestion when there is none.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

import requests

import config
from color_code import (
    format_resistance,
    get_colors_from_value,
    is_e24_value,
    snap_to_e24,
)
from resistor_constants import BAND_LABELS, band_roles

log = logging.getLogger(__name__)


class SuggestionError(Exception):
    """The advisory service could not produce a suggestion."""


# ---------------------------------------------------------------------------
# Remote advisor
# ---------------------------------------------------------------------------

class SuggestionClient:
    """HTTP client for a remote suggestion service.

    Args:
        url:     Endpoint accepting a JSON POST.
        session: Optional ``requests.Session`` (tests pass a MagicMock).
    """

    def __init__(self, url: str, session: requests.Session | None = None) -> None:
        self.url = url
        self.session = session if session is not None else requests.Session()

    def suggest(self, resistance: float) -> str:
        """Ask the service about *resistance* ohms and return its text.

        Raises:
            SuggestionError: On any request failure (connection, timeout,
                bad URL, redirects), a non-200 status or a reply without a
                ``suggestion`` string.
        """
        try:
            response = self.session.post(
                self.url,
                json={"resistance": resistance},
                timeout=(config.CONNECT_TIMEOUT, config.READ_TIMEOUT),
            )
        except requests.exceptions.ConnectionError as err:
            log.warning("Suggestion service unreachable at %s: %s", self.url, err)
            raise SuggestionError("cannot connect to server") from err
        except requests.exceptions.Timeout as err:
            log.warning("Suggestion service timed out at %s: %s", self.url, err)
            raise SuggestionError("failed to read from the server") from err
        except requests.exceptions.RequestException as err:
            log.warning("Suggestion request to %s failed: %s", self.url, err)
            raise SuggestionError("request to server failed") from err

        if response.status_code != 200:
            log.warning("Suggestion service returned HTTP %d", response.status_code)
            raise SuggestionError(
                "unexpected HTTP status code [%d]" % response.status_code
            )

        try:
            payload = response.json()
        except ValueError as err:
            log.warning("Suggestion service sent malformed JSON: %s", err)
            raise SuggestionError("unexpected reply from server") from err

        suggestion = payload.get("suggestion") if isinstance(payload, dict) else None
        if not isinstance(suggestion, str):
            raise SuggestionError("unexpected reply from server")
        return suggestion

    def close(self) -> None:
        self.session.close()


# ---------------------------------------------------------------------------
# Offline advisor
# ---------------------------------------------------------------------------

class E24Advisor:
    """Suggests the nearest E24 value and the bands that need changing.

    Args:
        band_count: Band layout the advice is phrased for (default 4).
    """

    def __init__(self, band_count: int = 4) -> None:
        self.band_count = band_count

    def suggest(self, resistance: float) -> str:
        if resistance <= 0:
            return ""

        if is_e24_value(resistance):
            return f"{format_resistance(resistance)} is a standard E24 value."

        nearest = snap_to_e24(resistance)
        current = get_colors_from_value(resistance, self.band_count)
        target = get_colors_from_value(nearest, self.band_count)

        changes = [
            f"the {BAND_LABELS[role]} band from {old.name} to {new.name}"
            for role, old, new in zip(band_roles(self.band_count), current, target)
            if old != new
        ]

        text = (
            f"{format_resistance(resistance)} is not a standard E24 value; "
            f"the nearest is {format_resistance(nearest)}."
        )
        if changes:
            text += " Change " + ", ".join(changes) + "."
        return text

    def close(self) -> None:
        pass


def make_advisor(url: str | None = None):
    """Return a SuggestionClient for *url* (default: config), else an E24Advisor."""
    url = config.SUGGEST_URL if url is None else url
    if url:
        log.info("Using suggestion service at %s", url)
        return SuggestionClient(url)
    log.info("No suggestion service configured; using offline E24 advisor")
    return E24Advisor()


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class SuggestionDispatcher:
    """Runs advisor requests on daemon threads; newest request wins.

    Every call to :meth:`request` bumps a generation counter.  A worker only
    delivers its result if its generation is still the newest one, so a
    slow answer for an earlier input never overwrites a later one.  Older
    workers are left to finish on their own.

    Args:
        advisor:   Object with ``suggest(resistance) -> str``.
        on_result: Called with the suggestion text.
        on_error:  Called with the failure message.  Without it a failure
                   is delivered to *on_result* as ''.
    """

    def __init__(
        self,
        advisor,
        on_result: Callable[[str], None],
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._advisor = advisor
        self._on_result = on_result
        self._on_error = on_error
        self._lock = threading.Lock()
        self._generation = 0
        self._thread: threading.Thread | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def request(self, resistance: float) -> int:
        """Start a suggestion request for *resistance*; returns its generation."""
        with self._lock:
            self._generation += 1
            generation = self._generation

        thread = threading.Thread(
            target=self._run,
            args=(generation, resistance),
            name=f"suggest-{generation}",
            daemon=True,
        )
        self._thread = thread
        thread.start()
        return generation

    def discard_pending(self) -> None:
        """Drop whatever result the in-flight requests would deliver."""
        with self._lock:
            self._generation += 1

    def wait(self, timeout: float | None = None) -> None:
        """Block until the newest worker finishes (tests / shutdown only)."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def close(self) -> None:
        self.discard_pending()
        self._advisor.close()

    def _run(self, generation: int, resistance: float) -> None:
        error = None
        try:
            text = self._advisor.suggest(resistance)
        except SuggestionError as exc:
            log.warning("Suggestion for %r Ω failed: %s", resistance, exc)
            text = ""
            error = str(exc)

        with self._lock:
            if generation != self._generation:
                log.debug("Dropping stale suggestion #%d", generation)
                return
            if error is not None and self._on_error is not None:
                self._on_error(error)
            else:
                self._on_result(text)
