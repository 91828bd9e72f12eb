from pathlib import Path
import io
import json
import logging
import sys
import tempfile
import unittest
from unittest.mock import patch

SERVER_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(SERVER_DIR))

import sgr_cli
import sgr_settings

SAMPLE = "\x1b[0;1mdiff --git\x1b[0m\n\x1b[0;31m-import React\x1b[0m\n"


class CliTests(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(sgr_settings, "configure_logging")
        patcher.start()
        self.addCleanup(patcher.stop)
        # The CLI prints diagnostics itself; keep the renderer logger quiet.
        render_logger = logging.getLogger("sgr_render")
        self.addCleanup(render_logger.setLevel, render_logger.level)
        render_logger.setLevel(logging.ERROR)

    def run_cli(self, argv, stdin=""):
        out, err = io.StringIO(), io.StringIO()
        with patch("sys.stdin", io.StringIO(stdin)), patch("sys.stdout", out), patch("sys.stderr", err):
            code = sgr_cli.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_html_from_stdin(self):
        code, out, err = self.run_cli([], stdin=SAMPLE)
        self.assertEqual(code, 0)
        self.assertIn("font-weight: bold\">diff --git</span>", out)
        self.assertIn("color: rgb(170, 0, 0)", out)
        self.assertEqual(err, "")

    def test_json_format(self):
        code, out, _ = self.run_cli(["--format", "json"], stdin="\x1b[32mok")
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload["spans"], [{"t": "ok", "fg": "rgb(0, 170, 0)"}])
        self.assertEqual(payload["diagnostics"], [])

    def test_diagnostics_on_stderr(self):
        code, _, err = self.run_cli([], stdin="\x1b[38mx")
        self.assertEqual(code, 0)
        self.assertTrue(err.startswith("warning: "))
        self.assertIn("'38'", err)

    def test_quiet_and_strict(self):
        code, _, err = self.run_cli(["--quiet", "--strict"], stdin="\x1b[abcmx")
        self.assertEqual(code, 1)
        self.assertEqual(err, "")

    def test_page_wraps_in_pre(self):
        code, out, _ = self.run_cli(["--page"], stdin="x")
        self.assertEqual(code, 0)
        self.assertIn('<pre class="terminal"><span', out)
        self.assertIn("<title>stdin</title>", out)

    def test_reads_file_and_writes_output(self):
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "in.txt"
            dst = Path(tmp) / "out.html"
            src.write_text("\x1b[44mbg", encoding="utf-8")
            code, out, _ = self.run_cli([str(src), "-o", str(dst)])
            self.assertEqual(code, 0)
            self.assertEqual(out, "")
            self.assertIn("background-color: rgb(0, 0, 170)", dst.read_text(encoding="utf-8"))

    def test_missing_file(self):
        code, _, err = self.run_cli(["/nonexistent/input.txt"])
        self.assertEqual(code, 2)
        self.assertIn("cannot read", err)

    def test_unwritable_output(self):
        code, out, err = self.run_cli(["-o", "/nonexistent/dir/out.html"], stdin="x")
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("cannot write /nonexistent/dir/out.html", err)

    def test_log_level_flag_is_passed_through(self):
        self.run_cli(["--log-level", "debug"], stdin="x")
        sgr_settings.configure_logging.assert_called_once_with("debug")


class EnvTests(unittest.TestCase):
    def test_env_int_falls_back_on_garbage(self):
        with patch.dict("os.environ", {"SGR_PORT": "eighty"}):
            self.assertEqual(sgr_settings.env_int("SGR_PORT", 8788), 8788)
        with patch.dict("os.environ", {"SGR_PORT": " 9000 "}):
            self.assertEqual(sgr_settings.env_int("SGR_PORT", 8788), 9000)

    def test_env_str_default(self):
        with patch.dict("os.environ", {"SGR_HOST": "  "}):
            self.assertEqual(sgr_settings.env_str("SGR_HOST", "127.0.0.1"), "127.0.0.1")


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self.addCleanup(root.setLevel, root.level)
        patcher = patch.object(root, "handlers", [])
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_lowercase_level_name(self):
        sgr_settings.configure_logging("debug")
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_mixed_case_level_name(self):
        sgr_settings.configure_logging("Info")
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_unknown_level_falls_back_to_warning(self):
        sgr_settings.configure_logging("chatty")
        self.assertEqual(logging.getLogger().level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
