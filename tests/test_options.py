import os
import tempfile
import unittest
from unittest import mock

from permute_harness import config
from permute_harness.harness.options import HarnessOptions, OutputStream


class TestOutputStream(unittest.TestCase):
    def test_closed_by_default(self):
        stream = OutputStream()
        self.assertFalse(stream.is_open())
        self.assertIsNone(stream.fstream())

    def test_open_append_close(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.txt")
            stream = OutputStream(path)
            self.assertTrue(stream.is_open())
            stream.fstream().write("first\n")
            stream.close()
            self.assertFalse(stream.is_open())

            stream.open(path)
            stream.fstream().write("second\n")
            stream.close()

            with open(path) as f:
                self.assertEqual(f.read(), "first\nsecond\n")


class TestHarnessOptions(unittest.TestCase):
    def test_defaults_report_everything(self):
        options = HarnessOptions()
        self.assertFalse(options.omit_cout)
        self.assertFalse(options.omit_skipped)
        self.assertFalse(options.omit_failed)
        self.assertFalse(options.omit_passed)
        self.assertFalse(options.ostream.is_open())

    def test_from_config(self):
        with mock.patch.multiple(
            config,
            OMIT_COUT=True,
            OMIT_SKIPPED=False,
            OMIT_FAILED=True,
            OMIT_PASSED=False,
            OUTPUT_FILE=None,
        ):
            options = HarnessOptions.from_config()
        self.assertTrue(options.omit_cout)
        self.assertTrue(options.omit_failed)
        self.assertFalse(options.omit_skipped)
        self.assertFalse(options.ostream.is_open())

    def test_env_flag_parsing(self):
        with mock.patch.dict(os.environ, {"PERMUTE_X": "Yes", "PERMUTE_Y": "0"}):
            self.assertTrue(config._env_flag("PERMUTE_X"))
            self.assertFalse(config._env_flag("PERMUTE_Y", default=True))
            self.assertTrue(config._env_flag("PERMUTE_MISSING", default=True))


if __name__ == "__main__":
    unittest.main()
