"""
Tests for YAML suite validation, the suite runner and the CLI entry point.
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

import requests
import yaml

from http_smoke.config_models import (
    SmokeSuiteConfig,
    config_to_smoke_config,
    load_and_validate_config,
    resolve_form_path,
)
from http_smoke.core.runner import SuiteRunner
from http_smoke.core.session import SmokeSession
from http_smoke.http.client import RequestsHttpClient
from http_smoke.main import main

from local_server import LocalServer, SmokeTestHandler, closed_port


def _write(directory, name, text):
    path = os.path.join(directory, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestSuiteValidation(unittest.TestCase):
    def test_minimal_suite(self):
        config = SmokeSuiteConfig(**{"steps": [{"url": "http://a.test/"}]})
        self.assertEqual(config.suite.name, "smoke")
        self.assertEqual(config.steps[0].method, "GET")

    def test_method_is_case_insensitive(self):
        config = SmokeSuiteConfig(**{"steps": [{"url": "/x", "method": "post", "form": "f.txt"}]})
        self.assertEqual(config.steps[0].method, "POST")

    def test_single_pattern_becomes_list(self):
        config = SmokeSuiteConfig(**{"steps": [{"url": "/x", "expect": {"body": "hello"}}]})
        self.assertEqual(config.steps[0].expect.body, ["hello"])

    def test_invalid_suites(self):
        bad = [
            {"steps": []},
            {"steps": [{}]},
            {"steps": [{"url": "/x", "tcp": {"host": "h", "port": 1}}]},
            {"steps": [{"url": "/x", "form": "f.txt"}]},
            {"steps": [{"url": "/x", "method": "DELETE"}]},
            {"steps": [{"url": "/x", "cors": True}]},
            {"steps": [{"url": "/x", "preflight": True}]},
            {"steps": [{"tcp": {"host": "h", "port": 70000}}]},
            {"suite": {"url_prefix": "ftp://x"}, "steps": [{"url": "/x"}]},
            {"suite": {"timeout_s": 0}, "steps": [{"url": "/x"}]},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    SmokeSuiteConfig(**raw)

    def test_load_reports_field_paths(self):
        tmp = tempfile.mkdtemp()
        path = _write(tmp, "suite.yaml", "steps:\n  - url: /x\n    method: DELETE\n")
        with self.assertRaisesRegex(ValueError, "steps.0.method"):
            load_and_validate_config(path)

    def test_load_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_and_validate_config("/nonexistent/suite.yaml")

    def test_load_malformed_yaml(self):
        tmp = tempfile.mkdtemp()
        path = _write(tmp, "suite.yaml", "steps: [unclosed\n")
        with self.assertRaisesRegex(ValueError, "Invalid YAML"):
            load_and_validate_config(path)

    def test_config_to_smoke_config(self):
        config = SmokeSuiteConfig(**{
            "suite": {
                "url_prefix": "http://example.org",
                "host": "internal",
                "origin": "https://app",
                "headers": {"X-One": "1"},
                "proxy": "http://proxy:3128",
                "no_proxy": "localhost",
                "credentials": {"username": "alice"},
                "csrf_token": "t",
                "follow_redirects": False,
                "timeout_s": 3,
                "after_response": "csrf_from_form",
            },
            "steps": [{"url": "/login"}],
        })

        smoke = config_to_smoke_config(config)

        self.assertEqual(smoke.url_prefix, "http://example.org")
        self.assertEqual(smoke.host_override, "internal")
        self.assertEqual(smoke.extra_headers, ["X-One: 1"])
        self.assertEqual(smoke.no_proxy, "localhost")
        self.assertEqual(smoke.credentials.username, "alice")
        self.assertIsNone(smoke.credentials.password)
        self.assertFalse(smoke.follow_redirects)
        self.assertEqual(smoke.timeout_s, 3)
        self.assertEqual(smoke.after_response, "csrf_from_form")

    def test_form_path_relative_to_suite(self):
        resolved = resolve_form_path("forms/login.txt", "/srv/suites/site.yaml")
        self.assertEqual(str(resolved), os.path.join("/srv/suites", "forms", "login.txt"))


class TestSuiteRunner(unittest.TestCase):
    def setUp(self):
        self.server = LocalServer().__enter__()
        self.tmp = tempfile.mkdtemp()
        _write(self.tmp, "login.txt", "csrf=__SMOKE_CSRF_TOKEN__&user=bob")

    def tearDown(self):
        self.server.__exit__(None, None, None)

    def _run(self, raw):
        suite_path = os.path.join(self.tmp, "suite.yaml")
        suite = SmokeSuiteConfig(**raw)
        http = requests.Session()
        http.trust_env = False
        out = io.StringIO()
        with SmokeSession(config=config_to_smoke_config(suite), client=RequestsHttpClient(http), out=out, env={}) as s:
            code = SuiteRunner(s, suite_path).run(suite)
        return code, s, out.getvalue()

    def test_full_suite_passes(self):
        code, session, output = self._run({
            "suite": {
                "url_prefix": self.server.base_url,
                "origin": "https://app.example",
                "after_response": "csrf_from_form",
            },
            "steps": [
                {"url": "/ok", "expect": {"code_ok": True, "body": ["search"], "headers": "X-Smoke"}},
                {"url": "/missing", "expect": {"code": 404}},
                {"url": "/login", "expect": {"code_ok": True}},
                {"url": "/echo", "method": "POST", "form": "login.txt", "expect": {"body": "csrf=tok-42"}},
                {"url": "/cors", "cors": True, "expect": {"headers": "Access-Control-Allow-Origin"}},
                {"url": f"http://127.0.0.1:{closed_port()}/", "expect": {"no_response": True}},
                {"tcp": {"host": "127.0.0.1", "port": self.server.port}},
            ],
        })

        self.assertEqual(code, 0)
        self.assertEqual(session.ok_count, 9)
        self.assertEqual(session.fail_count, 0)
        self.assertTrue(output.endswith("OK (9/9)\n"))

    def test_failures_are_accumulated(self):
        code, session, output = self._run({
            "suite": {"url_prefix": self.server.base_url},
            "steps": [
                {"url": "/missing", "expect": {"code_ok": True, "body": "search"}},
                {"url": "/ok", "expect": {"code": 201}},
                {"url": "/ok", "expect": {"code_ok": True}},
            ],
        })

        self.assertEqual(code, 1)
        self.assertEqual(session.fail_count, 3)
        self.assertEqual(session.ok_count, 1)
        self.assertTrue(output.endswith("FAILED (3 failed of 4)\n"))

    def test_step_headers_and_token_apply(self):
        code, session, _ = self._run({
            "suite": {"url_prefix": self.server.base_url},
            "steps": [
                {"url": "/headers", "headers": {"X-Step": "on"}, "expect": {"body": "X-Step: on"}},
                {
                    "url": "/echo",
                    "method": "POST",
                    "form": "login.txt",
                    "csrf_token": "step-token",
                    "expect": {"body": "csrf=step-token"},
                },
            ],
        })

        self.assertEqual(code, 0)
        self.assertEqual(SmokeTestHandler.captured_body, b"csrf=step-token&user=bob")


class TestMain(unittest.TestCase):
    def setUp(self):
        self.server = LocalServer().__enter__()
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        self.server.__exit__(None, None, None)

    def _suite(self, steps):
        text = yaml.safe_dump({"suite": {"url_prefix": self.server.base_url}, "steps": steps})
        return _write(self.tmp, "suite.yaml", text)

    def _main(self, argv):
        out = io.StringIO()
        with patch.dict(os.environ, {"NO_PROXY": "127.0.0.1", "no_proxy": "127.0.0.1"}):
            with redirect_stdout(out):
                with self.assertRaises(SystemExit) as ctx:
                    main(argv)
        return ctx.exception.code, out.getvalue()

    def test_passing_suite_exits_zero(self):
        path = self._suite([{"url": "/ok", "expect": {"code_ok": True}}])
        code, output = self._main([path, "--log-config", "/nonexistent/logging.yaml"])

        self.assertEqual(code, 0)
        self.assertIn("OK (1/1)", output)

    def test_failing_suite_exits_one(self):
        path = self._suite([{"url": "/missing", "expect": {"code_ok": True}}])
        code, output = self._main([path, "--log-config", "/nonexistent/logging.yaml"])

        self.assertEqual(code, 1)
        self.assertIn("FAILED (1 failed of 1)", output)

    def test_invalid_suite_exits_two(self):
        path = _write(self.tmp, "bad.yaml", "steps: []\n")
        code, output = self._main([path, "--log-config", "/nonexistent/logging.yaml"])

        self.assertEqual(code, 2)
        self.assertIn("Suite validation failed", output)


if __name__ == "__main__":
    unittest.main()
