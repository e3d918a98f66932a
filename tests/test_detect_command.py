from __future__ import annotations

import logging
import unittest

from balltrack import cli


class DetectCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)

    def test_missing_uri_exits_with_configuration_error(self) -> None:
        code = cli.main(["detect", "--quiet", "--headless", "--no-event-stdout"])
        self.assertEqual(code, 2)

    def test_out_of_range_option_exits_with_configuration_error(self) -> None:
        code = cli.main(["detect", "--quiet", "--uri", "0", "--min-confidence", "2"])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
