import unittest
from unittest.mock import patch, Mock

import requests

from eco_engine.carbon import FOOTPRINT_TIPS, estimate_footprint
from eco_engine.ingestion import NominatimGeocoder, SummaryClient, parse_rss
from eco_engine.ingestion.news import NewsClient
from eco_engine.models import NO_FUN_FACT

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>NASA Breaking News</title>
    <link>https://www.nasa.gov</link>
    <item>
      <title>Satellite maps vegetation</title>
      <link>https://www.nasa.gov/a</link>
      <pubDate>Tue, 02 Jan 2024 10:00:00 EST</pubDate>
    </item>
    <item>
      <title>No date here</title>
      <link>https://www.nasa.gov/b</link>
    </item>
    <item>
      <title> Sea ice update </title>
      <link>https://www.nasa.gov/c</link>
      <pubDate>Wed, 03 Jan 2024 09:00:00 EST</pubDate>
    </item>
  </channel>
</rss>
"""


def _fake_response(payload=None, status_code=200, text=""):
    m = Mock()
    m.status_code = status_code
    m.json.return_value = payload
    m.text = text
    if status_code == 200:
        m.raise_for_status.side_effect = None
    else:
        m.raise_for_status.side_effect = requests.HTTPError(f"{status_code}", response=m)
    return m


class TestCarbon(unittest.TestCase):
    def test_weighted_sum(self) -> None:
        self.assertAlmostEqual(estimate_footprint(10, 5, 2), 2.0 + 4.0 + 5.0)
        self.assertEqual(estimate_footprint(0, 0, 0), 0.0)
        self.assertAlmostEqual(estimate_footprint(100, 100, 10), 20.0 + 80.0 + 25.0)

    def test_out_of_range_inputs(self) -> None:
        with self.assertRaises(ValueError):
            estimate_footprint(-1, 0, 0)
        with self.assertRaises(ValueError):
            estimate_footprint(0, 101, 0)
        with self.assertRaises(ValueError):
            estimate_footprint(0, 0, 11)

    def test_tips_present(self) -> None:
        self.assertTrue(len(FOOTPRINT_TIPS) >= 5)


class TestNews(unittest.TestCase):
    def test_parse_keeps_complete_items(self) -> None:
        items = parse_rss(RSS)
        self.assertEqual([i.title for i in items], ["Satellite maps vegetation", "Sea ice update"])
        self.assertEqual(items[1].link, "https://www.nasa.gov/c")
        self.assertEqual(items[0].pub_date, "Tue, 02 Jan 2024 10:00:00 EST")

    @patch("requests.Session.get")
    def test_client_limits_items(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response(text=RSS)
        items = NewsClient(limit=1).fetch()
        self.assertEqual(len(items), 1)
        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["headers"]["User-Agent"], "Mozilla/5.0")


class TestGeocoder(unittest.TestCase):
    @patch("requests.Session.get")
    def test_first_hit_and_place_name(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response(
            [
                {
                    "lat": "48.8566",
                    "lon": "2.3522",
                    "display_name": "Paris, Ile-de-France, France",
                    "address": {"city": "Paris", "state": "Ile-de-France", "country": "France"},
                }
            ]
        )
        hit = NominatimGeocoder().geocode("paris")
        self.assertAlmostEqual(hit.latitude, 48.8566)
        self.assertAlmostEqual(hit.longitude, 2.3522)
        self.assertEqual(hit.place_name("paris"), "Paris")
        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["params"]["q"], "paris")
        self.assertEqual(kwargs["params"]["limit"], 1)

    @patch("requests.Session.get")
    def test_no_match(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response([])
        self.assertIsNone(NominatimGeocoder().geocode("zzzz"))

    @patch("requests.Session.get")
    def test_place_name_fallbacks(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response([{"lat": "1", "lon": "2", "address": {"country": "Kenya"}}])
        self.assertEqual(NominatimGeocoder().geocode("somewhere").place_name("somewhere"), "Kenya")
        mock_get.return_value = _fake_response([{"lat": "1", "lon": "2"}])
        self.assertEqual(NominatimGeocoder().geocode("somewhere").place_name("somewhere"), "somewhere")


class TestSummary(unittest.TestCase):
    @patch("requests.Session.get")
    def test_extract_and_thumbnail(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response(
            {"extract": "New York is a city.", "thumbnail": {"source": "https://img.example/ny.jpg"}}
        )
        fact = SummaryClient().fetch("New York")
        self.assertEqual(fact.summary, "New York is a city.")
        self.assertEqual(fact.image_url, "https://img.example/ny.jpg")
        self.assertIsNone(fact.error)
        args, _ = mock_get.call_args
        self.assertTrue(args[0].endswith("/page/summary/New%20York"))

    @patch("requests.Session.get")
    def test_failures_become_unavailable(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response({}, status_code=404)
        self.assertEqual(SummaryClient().fetch("Atlantis").error, NO_FUN_FACT)
        mock_get.side_effect = requests.ConnectionError("down")
        self.assertEqual(SummaryClient().fetch("Atlantis").error, NO_FUN_FACT)
        self.assertEqual(SummaryClient().fetch("  ").error, NO_FUN_FACT)

    @patch("requests.Session.get")
    def test_malformed_thumbnail_keeps_extract(self, mock_get: Mock) -> None:
        mock_get.return_value = _fake_response({"extract": "Lima is a city.", "thumbnail": "lima.jpg"})
        fact = SummaryClient().fetch("Lima")
        self.assertEqual(fact.summary, "Lima is a city.")
        self.assertIsNone(fact.image_url)

        mock_get.return_value = _fake_response({"extract": ["not", "text"]})
        self.assertEqual(SummaryClient().fetch("Lima").error, NO_FUN_FACT)


if __name__ == "__main__":
    unittest.main()
