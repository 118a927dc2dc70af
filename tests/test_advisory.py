"""
Tests for the advisory suggestion layer (advisory.py).

The remote client is exercised against a MagicMock requests session; no
network access is needed.
"""

import threading
import unittest
from unittest.mock import MagicMock

import requests

from advisory import (
    E24Advisor,
    SuggestionClient,
    SuggestionDispatcher,
    SuggestionError,
    make_advisor,
)


def _response(status=200, payload=None, bad_json=False):
    response = MagicMock()
    response.status_code = status
    if bad_json:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


class TestSuggestionClient(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.client = SuggestionClient("http://advisor.local/suggest", session=self.session)

    def test_posts_resistance_and_returns_text(self):
        self.session.post.return_value = _response(payload={"suggestion": "Use 4.7 kΩ"})
        self.assertEqual(self.client.suggest(4800.0), "Use 4.7 kΩ")
        self.session.post.assert_called_once_with(
            "http://advisor.local/suggest",
            json={"resistance": 4800.0},
            timeout=(3.05, 10),
        )

    def test_connection_error(self):
        self.session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(SuggestionError):
            self.client.suggest(4800.0)

    def test_bad_url_becomes_suggestion_error(self):
        self.session.post.side_effect = requests.exceptions.MissingSchema("no scheme")
        with self.assertRaises(SuggestionError):
            self.client.suggest(4800.0)

    def test_too_many_redirects(self):
        self.session.post.side_effect = requests.exceptions.TooManyRedirects("loop")
        with self.assertRaises(SuggestionError):
            self.client.suggest(4800.0)

    def test_read_timeout(self):
        self.session.post.side_effect = requests.exceptions.ReadTimeout("slow")
        with self.assertRaises(SuggestionError):
            self.client.suggest(4800.0)

    def test_http_error_status(self):
        self.session.post.return_value = _response(status=500)
        with self.assertRaisesRegex(SuggestionError, r"\[500\]"):
            self.client.suggest(4800.0)

    def test_malformed_json(self):
        self.session.post.return_value = _response(bad_json=True)
        with self.assertRaises(SuggestionError):
            self.client.suggest(4800.0)

    def test_reply_without_suggestion(self):
        self.session.post.return_value = _response(payload={"answer": 42})
        with self.assertRaises(SuggestionError):
            self.client.suggest(4800.0)

    def test_close_closes_session(self):
        self.client.close()
        self.session.close.assert_called_once()


class TestE24Advisor(unittest.TestCase):

    def setUp(self):
        self.advisor = E24Advisor()

    def test_standard_value(self):
        self.assertEqual(self.advisor.suggest(4700), "4.7 kΩ is a standard E24 value.")

    def test_non_standard_value_names_band_to_change(self):
        text = self.advisor.suggest(4800)
        self.assertEqual(
            text,
            "4.8 kΩ is not a standard E24 value; the nearest is 4.7 kΩ. "
            "Change the 2nd Digit band from Grey to Violet.",
        )

    def test_five_band_phrasing(self):
        text = E24Advisor(band_count=5).suggest(4800)
        self.assertIn("2nd Digit band from Grey to Violet", text)

    def test_non_positive_gives_nothing(self):
        self.assertEqual(self.advisor.suggest(0), "")


class TestMakeAdvisor(unittest.TestCase):

    def test_no_url_gives_offline_advisor(self):
        self.assertIsInstance(make_advisor(""), E24Advisor)

    def test_url_gives_client(self):
        advisor = make_advisor("http://advisor.local/suggest")
        self.assertIsInstance(advisor, SuggestionClient)
        advisor.close()


class _GatedAdvisor:
    """Advisor whose answer for a given value waits for an Event."""

    def __init__(self):
        self.gates = {}

    def suggest(self, resistance):
        gate = self.gates.get(resistance)
        if gate is not None:
            gate.wait(5)
        return f"for {resistance:g}"

    def close(self):
        pass


class _FailingAdvisor:
    def suggest(self, resistance):
        raise SuggestionError("cannot connect to server")

    def close(self):
        pass


def _join(name):
    for thread in threading.enumerate():
        if thread.name == name:
            thread.join(5)


class TestSuggestionDispatcher(unittest.TestCase):

    def setUp(self):
        self.results = []

    def test_delivers_result(self):
        dispatcher = SuggestionDispatcher(_GatedAdvisor(), self.results.append)
        dispatcher.request(100)
        dispatcher.wait(5)
        self.assertEqual(self.results, ["for 100"])

    def test_newer_request_supersedes_older(self):
        advisor = _GatedAdvisor()
        gate = threading.Event()
        advisor.gates[1] = gate
        dispatcher = SuggestionDispatcher(advisor, self.results.append)

        first = dispatcher.request(1)
        second = dispatcher.request(2)
        self.assertEqual(second, first + 1)
        dispatcher.wait(5)

        gate.set()
        _join(f"suggest-{first}")
        self.assertEqual(self.results, ["for 2"])

    def test_discard_pending_drops_in_flight_result(self):
        advisor = _GatedAdvisor()
        gate = threading.Event()
        advisor.gates[1] = gate
        dispatcher = SuggestionDispatcher(advisor, self.results.append)

        dispatcher.request(1)
        dispatcher.discard_pending()
        gate.set()
        dispatcher.wait(5)
        self.assertEqual(self.results, [])

    def test_failure_delivers_empty_text(self):
        dispatcher = SuggestionDispatcher(_FailingAdvisor(), self.results.append)
        dispatcher.request(100)
        dispatcher.wait(5)
        self.assertEqual(self.results, [""])

    def test_failure_goes_to_error_callback(self):
        errors = []
        dispatcher = SuggestionDispatcher(_FailingAdvisor(), self.results.append,
                                          on_error=errors.append)
        dispatcher.request(100)
        dispatcher.wait(5)
        self.assertEqual(self.results, [])
        self.assertEqual(errors, ["cannot connect to server"])

    def test_misconfigured_client_delivers_empty_text(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.MissingSchema("no scheme")
        client = SuggestionClient("advisor.local/suggest", session=session)
        dispatcher = SuggestionDispatcher(client, self.results.append)
        dispatcher.request(100)
        dispatcher.wait(5)
        self.assertEqual(self.results, [""])

    def test_wait_without_requests(self):
        SuggestionDispatcher(_GatedAdvisor(), self.results.append).wait(0.1)


if __name__ == "__main__":
    unittest.main()
