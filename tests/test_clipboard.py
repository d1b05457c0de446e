"""Tests for clipboard access."""

from __future__ import annotations

import unittest

from git_download_browse.clipboard import read_clipboard

from fakes import FakeRunner, result, which_only


class ReadClipboardTests(unittest.TestCase):
    def test_uses_first_available_tool(self) -> None:
        runner = FakeRunner(lambda cmd, cwd: result(cmd, stdout="octo/hello\n"))
        self.assertEqual(read_clipboard(runner=runner, which=which_only("xclip")), "octo/hello")
        self.assertEqual(runner.commands, [["xclip", "-selection", "clipboard", "-o"]])

    def test_falls_back_to_primary_selection(self) -> None:
        def handler(cmd, cwd):
            if "primary" in cmd:
                return result(cmd, stdout="https://github.com/octo/hello")
            return result(cmd, stdout="")

        runner = FakeRunner(handler)
        self.assertEqual(read_clipboard(runner=runner, which=which_only("xclip")), "https://github.com/octo/hello")

    def test_no_tools(self) -> None:
        runner = FakeRunner()
        self.assertEqual(read_clipboard(runner=runner, which=which_only()), "")
        self.assertEqual(runner.calls, [])


if __name__ == "__main__":
    unittest.main()
