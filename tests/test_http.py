"""Tests for the retrying HTTP client used for URL inputs."""
import unittest
from unittest import mock

from requests.exceptions import ConnectionError, HTTPError

from gpx_splitter.providers.http import HTTPClient


def _response(text="<gpx/>", error=None):
    r = mock.Mock()
    r.text = text
    r.raise_for_status.side_effect = error
    return r


class TestHTTPClient(unittest.TestCase):

    def setUp(self):
        self.client = HTTPClient(user_agent="test-agent", tries=3, backoff_s=0.0)
        self.client.s = mock.Mock()

    def test_sets_user_agent(self):
        client = HTTPClient(user_agent="test-agent")
        self.assertEqual(client.s.headers["User-Agent"], "test-agent")

    @mock.patch("gpx_splitter.providers.http.time.sleep")
    def test_retries_connection_errors(self, sleep):
        self.client.s.get.side_effect = [ConnectionError("reset"), _response("<gpx>ok</gpx>")]
        self.assertEqual(self.client.get_text("https://example.com/r.gpx"), "<gpx>ok</gpx>")
        self.assertEqual(self.client.s.get.call_count, 2)
        sleep.assert_called_once()

    @mock.patch("gpx_splitter.providers.http.time.sleep")
    def test_gives_up_after_tries(self, sleep):
        self.client.s.get.side_effect = ConnectionError("down")
        with self.assertRaises(ConnectionError):
            self.client.get_text("https://example.com/r.gpx")
        self.assertEqual(self.client.s.get.call_count, 3)

    def test_http_errors_are_not_retried(self):
        self.client.s.get.return_value = _response(error=HTTPError("404"))
        with self.assertRaises(HTTPError):
            self.client.get_text("https://example.com/missing.gpx")
        self.assertEqual(self.client.s.get.call_count, 1)

    def test_from_settings(self):
        client = HTTPClient.from_settings()
        self.assertGreater(client.tries, 0)
        self.assertIn("gpx-splitter", client.user_agent)


if __name__ == "__main__":
    unittest.main()
