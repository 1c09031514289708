__doc_all__ = []

import contextlib
import datetime
import io
import json
import sys
import unittest

import structlog

from genloop.core.util import priority, getnow, configure_logging, LOG_LEVELS


class UtilTest(unittest.TestCase):
    def test_priority_flags(self):
        self.assertEqual(priority.DEFAULT, -1)
        self.assertEqual(priority.LAST, priority.NOPRIO)
        self.assertEqual(priority.FIRST, priority.PRIO)
        self.assertTrue(priority.FIRST & priority.OP)
        self.assertTrue(priority.FIRST & priority.CORO)
        self.assertFalse(priority.LAST & (priority.OP | priority.CORO))

    def test_getnow(self):
        self.assertIsInstance(getnow(), datetime.datetime)


class LoggingTest(unittest.TestCase):
    def tearDown(self):
        structlog.reset_defaults()

    def log_lines(self, *args):
        configure_logging(*args)
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            logger = structlog.get_logger()
            logger.debug("test.debug")
            logger.info("test.info", answer=42)
        return out.getvalue().splitlines()

    def test_json(self):
        lines = self.log_lines("info", "json")
        self.assertEqual(len(lines), 1)
        record = json.loads(lines[0])
        self.assertEqual(record['event'], "test.info")
        self.assertEqual(record['level'], "info")
        self.assertEqual(record['answer'], 42)
        self.assertIn('timestamp', record)

    def test_level(self):
        lines = self.log_lines("debug", "json")
        self.assertEqual([json.loads(i)['event'] for i in lines],
                         ["test.debug", "test.info"])

    def test_unknown_level(self):
        self.assertRaises(ValueError, configure_logging, "verbose")
        self.assertRaises(ValueError, configure_logging, "")

    def test_level_names(self):
        for level in LOG_LEVELS:
            configure_logging(level.upper())

    def test_console(self):
        lines = self.log_lines("info")
        self.assertEqual(len(lines), 1)
        self.assertIn("test.info", lines[0])
        self.assertIn("answer", lines[0])


if __name__ == "__main__":
    sys.argv.insert(1, '-v')
    unittest.main()
