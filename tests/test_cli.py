"""
Tests for CLI entry points.

get_schedule is patched so that no command touches the network, and
UCMSCHED_HOME points at a temporary directory so that the user's real
config and watch list are never read or written.
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from ucmsched.cli import main
from ucmsched.errors import FetchError
from ucmsched.parse import parse_schedule
from ucmsched.storage import load_watched_crns

from test_parse_schedule import SAMPLE, course_tr, header_tr, page


class CLITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._home = tempfile.TemporaryDirectory()
        self.addCleanup(self._home.cleanup)
        env = mock.patch.dict(os.environ, {"UCMSCHED_HOME": self._home.name})
        env.start()
        self.addCleanup(env.stop)

        self.schedule = parse_schedule(SAMPLE, 2021)
        patcher = mock.patch("ucmsched.cli.get_schedule", return_value=self.schedule)
        self.get_schedule = patcher.start()
        self.addCleanup(patcher.stop)

    def run_cli(self, *argv: str) -> tuple:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                main(["--no-color", *argv])
        return ctx.exception.code, out.getvalue(), err.getvalue()


class TestRegistration(CLITestCase):
    def test_prints_table(self) -> None:
        code, out, _ = self.run_cli("registration", "cse", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 0)
        for crn in ("10163", "10164", "10165", "10166"):
            self.assertIn(crn, out)
        self.get_schedule.assert_called_once_with(2021, "fall", "cse", False)

    def test_filter_by_number(self) -> None:
        code, out, _ = self.run_cli("reg", "cse", "100", "--term", "fall", "--year", "2021", "--open")
        self.assertEqual(code, 0)
        self.assertIn("10165", out)
        self.assertNotIn("10163", out)
        self.get_schedule.assert_called_once_with(2021, "fall", "cse", True)

    def test_unknown_activity_shown_as_none(self) -> None:
        self.get_schedule.return_value = parse_schedule(
            page(header_tr(), course_tr(10190, activity="XYZ"), course_tr(10191, activity="DISC")), 2021
        )
        code, out, _ = self.run_cli("registration", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 0)
        self.assertIn("none", out)
        self.assertIn("DISC", out)
        self.assertNotIn("XYZ", out)

    def test_no_matches(self) -> None:
        code, out, _ = self.run_cli("registration", "cse", "999", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 1)
        self.assertIn("no matches", out)

    def test_requires_year(self) -> None:
        code, _, err = self.run_cli("registration", "--term", "fall")
        self.assertEqual(code, 1)
        self.assertIn("No year given", err)
        self.get_schedule.assert_not_called()

    def test_uses_configured_term_and_year(self) -> None:
        self.run_cli("config", "set", "--term", "Spring", "--year", "2022")
        code, _, _ = self.run_cli("registration")
        self.assertEqual(code, 0)
        self.get_schedule.assert_called_once_with(2022, "spring", "", False)

    def test_fetch_error_is_reported(self) -> None:
        self.get_schedule.side_effect = FetchError("404 Not Found", status=404)
        code, out, err = self.run_cli("registration", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 1)
        self.assertIn("error: 404 Not Found", err)
        self.assertEqual(out, "")


class TestCheckCRNs(CLITestCase):
    def test_found(self) -> None:
        code, out, _ = self.run_cli("check-crns", "10165", "99999", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 0)
        self.assertIn("10165", out)
        self.assertNotIn("99999", out)

    def test_positional_crns_are_not_saved(self) -> None:
        code, _, _ = self.run_cli("check-crns", "10165", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 0)
        self.assertEqual(load_watched_crns(), set())

    def test_not_found(self) -> None:
        code, out, _ = self.run_cli("check-crns", "99999", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 1)
        self.assertIn("could not find", out)


class TestWatch(CLITestCase):
    def test_once_reports_open_crns(self) -> None:
        code, out, _ = self.run_cli("watch", "10163", "--once", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 0)
        self.assertIn("Open crns:", out)
        self.assertIn("10163", out)
        self.get_schedule.assert_called_once_with(2021, "fall", "", True)

    def test_once_nothing_open(self) -> None:
        code, out, _ = self.run_cli("watch", "99999", "--once", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 1)
        self.assertNotIn("Open crns:", out)

    def test_requires_crns(self) -> None:
        code, out, _ = self.run_cli("watch", "--once", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 1)
        self.assertIn("no crns to check", out)

    def test_error_keeps_polling(self) -> None:
        self.get_schedule.side_effect = [FetchError("503 Service Unavailable", status=503), self.schedule]
        with mock.patch("ucmsched.cli.time.sleep", side_effect=[None, KeyboardInterrupt]) as sleep:
            code, out, _ = self.run_cli("watch", "10163", "--interval", "1", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 130)
        self.assertEqual(self.get_schedule.call_count, 2)
        self.assertIn("Open crns:", out)
        sleep.assert_called_with(1.0)


class TestCRNsAndConfig(CLITestCase):
    def test_add_list_remove(self) -> None:
        code, _, _ = self.run_cli("crns", "add", "10163", "10164")
        self.assertEqual(code, 0)
        self.assertEqual(load_watched_crns(), {10163, 10164})

        code, out, _ = self.run_cli("crns", "list")
        self.assertEqual(out.split(), ["10163", "10164"])

        self.run_cli("crns", "remove", "10163")
        self.assertEqual(load_watched_crns(), {10164})

    def test_add_requires_crn(self) -> None:
        code, _, _ = self.run_cli("crns", "add")
        self.assertEqual(code, 1)

    def test_watched_crns_are_checked(self) -> None:
        self.run_cli("crns", "add", "10166")
        code, out, _ = self.run_cli("watch", "--once", "--term", "fall", "--year", "2021")
        self.assertEqual(code, 0)
        self.assertIn("10166", out)

    def test_config_show(self) -> None:
        code, out, _ = self.run_cli("config", "show")
        self.assertEqual(code, 0)
        self.assertIn("term:     (unset)", out)
        self.assertIn("subject:  ALL", out)


if __name__ == "__main__":
    unittest.main()
