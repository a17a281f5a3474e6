import logging
import os
import unittest
from unittest import mock

from venturesim.config.env import get_mail_config, get_projection_config, get_store_config, parse_flag
from venturesim.config.log import configure_logging


class TestConfig(unittest.TestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        self.assertEqual(get_store_config().data_root, "./sim_data")
        self.assertTrue(get_projection_config().compound_growth)
        self.assertEqual(get_mail_config().app_url, "http://localhost:8000")

    @mock.patch.dict(os.environ, {"SIM_COMPOUND_GROWTH": "off", "SIM_APP_URL": "https://x.io/",
                                  "SIM_DATA_ROOT": "/var/sim"})
    def test_overrides(self):
        self.assertFalse(get_projection_config().compound_growth)
        self.assertEqual(get_mail_config().app_url, "https://x.io")
        self.assertEqual(get_store_config().data_root, "/var/sim")

    def test_parse_flag(self):
        self.assertTrue(parse_flag(None, True))
        self.assertFalse(parse_flag(None, False))
        for raw in ("false", "False", " off ", "0", "no", "", False, 0):
            self.assertFalse(parse_flag(raw, True), f"{raw!r}")
        for raw in ("true", "1", "yes", True, 1):
            self.assertTrue(parse_flag(raw, False), f"{raw!r}")

    def test_logging_configured_once(self):
        configure_logging()
        configure_logging()
        handlers = [h for h in logging.getLogger("venturesim").handlers if getattr(h, "_venturesim", False)]
        self.assertEqual(len(handlers), 1)


if __name__ == "__main__":
    unittest.main()
