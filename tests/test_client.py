"""
Tests for the public client: URL joining, headers, verb helpers and endpoint wrappers.
"""

import json
import random
import unittest

from livesurf.client import LiveSurfClient, resolve_url
from livesurf.config_models import ClientConfig
from livesurf.core.errors import ConfigError, NonRetryableClientError, RequestCancelled
from livesurf.http.response import HttpResponse
from livesurf.utils.time import SystemClock


class RecordingTransport:
    def __init__(self, status=200, text="{}"):
        self.status = status
        self.text = text
        self.calls = []
        self.closed = False

    def send(self, method, url, headers, body=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "body": body})
        return HttpResponse(status_code=self.status, text=self.text)

    def close(self):
        self.closed = True


class TestResolveUrl(unittest.TestCase):
    def test_trims_leading_and_trailing_slashes(self):
        base = "https://api.livesurf.ru/"
        for endpoint in ("user", "/user", "user/", "//user//"):
            self.assertEqual(resolve_url(base, endpoint), "https://api.livesurf.ru/user")

    def test_append_slash_restores_one(self):
        for endpoint in ("group/5", "/group/5/", "group/5//"):
            self.assertEqual(
                resolve_url("https://api.livesurf.ru/", endpoint, append_slash=True),
                "https://api.livesurf.ru/group/5/",
            )

    def test_query_string_kept_after_slash(self):
        self.assertEqual(
            resolve_url("https://api.livesurf.ru", "pages-compiled-stats/?page=1", append_slash=True),
            "https://api.livesurf.ru/pages-compiled-stats/?page=1",
        )


class TestLiveSurfClient(unittest.TestCase):
    def setUp(self):
        self.transport = RecordingTransport()
        self.client = LiveSurfClient(
            "secret-key",
            base_url="https://api.example.test///",
            transport=self.transport,
            rng=random.Random(0),
        )

    def tearDown(self):
        self.client.close()

    def test_defaults(self):
        cfg = LiveSurfClient("k", transport=self.transport).config
        self.assertEqual(cfg.base_url, "https://api.livesurf.ru/")
        self.assertEqual(cfg.timeout_seconds, 15)
        self.assertEqual(cfg.rate_limit_per_sec, 10)
        self.assertEqual(cfg.max_retries, 3)
        self.assertEqual(cfg.initial_backoff_ms, 500)

    def test_base_url_normalized(self):
        self.assertEqual(self.client.base_url, "https://api.example.test/")

    def test_headers(self):
        self.client.get("user/")
        headers = self.transport.calls[0]["headers"]
        self.assertEqual(headers["Accept"], "application/json")
        self.assertEqual(headers["Authorization"], "secret-key")
        self.assertEqual(headers["Content-Type"], "application/json")

    def test_request_accepts_lowercase_method(self):
        self.assertEqual(self.client.request("get", "/categories"), {})
        self.assertEqual(self.transport.calls[0]["method"], "GET")
        self.assertEqual(self.transport.calls[0]["url"], "https://api.example.test/categories")

    def test_request_joins_endpoint_literally(self):
        self.client.request("GET", "/user/")
        self.client.post("group/create", "hello")
        self.assertEqual(self.transport.calls[0]["url"], "https://api.example.test/user")
        self.assertEqual(self.transport.calls[1]["url"], "https://api.example.test/group/create")
        self.assertEqual(self.transport.calls[1]["body"], '"hello"')

    def test_append_slash_option_applies_to_request(self):
        client = LiveSurfClient("k", transport=self.transport, append_slash=True)
        client.request("GET", "/user")
        self.assertEqual(self.transport.calls[0]["url"], "https://api.livesurf.ru/user/")

    def test_endpoint_wrappers_keep_trailing_slash(self):
        self.client.get_user()
        self.client.get_group(4)
        urls = [c["url"] for c in self.transport.calls]
        self.assertEqual(urls, ["https://api.example.test/user/", "https://api.example.test/group/4/"])

    def test_unknown_method_rejected(self):
        with self.assertRaises(ValueError):
            self.client.request("PUT", "user/")

    def test_post_without_body_sends_empty_object(self):
        self.client.start_page(9)
        call = self.transport.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], "https://api.example.test/page/9/start/")
        self.assertEqual(call["body"], "{}")

    def test_delete_sends_no_body(self):
        self.client.delete_group(3)
        call = self.transport.calls[0]
        self.assertEqual((call["method"], call["body"]), ("DELETE", None))

    def test_endpoint_wrappers_route(self):
        self.client.update_group(5, {"name": "x"})
        self.client.add_group_credits(5, 100)
        self.client.set_manual_mode()
        self.client.get_sources_social()

        calls = [(c["method"], c["url"].replace("https://api.example.test/", "")) for c in self.transport.calls]
        self.assertEqual(
            calls,
            [
                ("PATCH", "group/5/"),
                ("POST", "group/5/add_credits/"),
                ("POST", "user/manualmode/"),
                ("GET", "sources/social/"),
            ],
        )
        self.assertEqual(json.loads(self.transport.calls[1]["body"]), {"credits": 100})

    def test_stats_query_encoded(self):
        self.client.get_stats({"page": 12, "date_from": "2024-01-01 00:00"})
        self.assertEqual(
            self.transport.calls[0]["url"],
            "https://api.example.test/pages-compiled-stats/?page=12&date_from=2024-01-01+00%3A00",
        )

    def test_error_surfaces_as_client_error(self):
        self.transport.status = 403
        self.transport.text = '{"error":"forbidden"}'
        with self.assertRaises(NonRetryableClientError) as ctx:
            self.client.get_user()
        self.assertEqual(ctx.exception.message, "forbidden")

    def test_invalid_config_raises_config_error(self):
        with self.assertRaises(ConfigError):
            LiveSurfClient("  ", transport=self.transport)
        with self.assertRaises(ConfigError):
            LiveSurfClient("k", rate_limit_per_sec=0, transport=self.transport)

    def test_close_cancels_clock_and_transport(self):
        clock = SystemClock()
        client = LiveSurfClient("k", transport=self.transport, clock=clock)
        with client:
            client.get_user()
        self.assertTrue(clock.cancelled)
        self.assertTrue(self.transport.closed)
        with self.assertRaises(RequestCancelled):
            client.get_user()

    def test_from_config_shares_nothing_between_clients(self):
        cfg = ClientConfig(api_key="k", rate_limit_per_sec=2)
        a = LiveSurfClient.from_config(cfg, transport=RecordingTransport())
        b = LiveSurfClient.from_config(cfg, transport=RecordingTransport())
        self.assertIsNot(a.limiter, b.limiter)
        self.assertEqual(a.limiter.rate_limit_per_sec, 2)


if __name__ == "__main__":
    unittest.main()
