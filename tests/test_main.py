import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from click.testing import CliRunner

from nativelink import config
from nativelink.main import cli


class TestMain(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, config.CONFIG_FILE)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_init_creates_config_and_store(self):
        result = self.runner.invoke(cli, ["--path", self.test_dir, "init"])
        self.assertEqual(result.exit_code, 0, result.output)
        conf = config.load_config(self.test_dir)
        self.assertEqual(conf["dependency"]["name"], "glfw")
        self.assertEqual(conf["store"]["root"], "deps")
        self.assertTrue(os.path.isdir(os.path.join(self.test_dir, "deps")))

    def test_init_with_options(self):
        result = self.runner.invoke(
            cli, ["--path", self.test_dir, "init", "--dependency", "sdl2", "--store-root", "prebuilt"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        conf = config.load_config(self.test_dir)
        self.assertEqual(conf["dependency"]["name"], "sdl2")
        self.assertTrue(os.path.isdir(os.path.join(self.test_dir, "prebuilt")))

    def test_init_does_not_overwrite(self):
        config.save_config({"store": {"root": "mine"}}, path=self.test_dir)
        result = self.runner.invoke(cli, ["--path", self.test_dir, "init"])
        self.assertIn("already exists", result.output)
        self.assertEqual(config.load_config(self.test_dir), {"store": {"root": "mine"}})

        self.runner.invoke(cli, ["--path", self.test_dir, "init", "--force"])
        self.assertEqual(config.load_config(self.test_dir)["store"]["root"], "deps")

    def test_resolve(self):
        config.save_config(config.default_config(), path=self.test_dir)
        result = self.runner.invoke(cli, ["--path", self.test_dir, "resolve", "x86_64-pc-windows-msvc", "-l", "glfw3"])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.stdout.splitlines()
        self.assertIn("arch: x86_64", lines)
        self.assertIn("vendor: pc", lines)
        self.assertIn("os: windows", lines)
        self.assertIn("env: msvc", lines)
        self.assertIn("artifact: windows/x86_64/glfw3.lib", lines)

    def test_resolve_stdout_has_only_components(self):
        config.save_config(config.default_config(), path=self.test_dir)
        result = self.runner.invoke(cli, ["--path", self.test_dir, "resolve", "x86_64-pc-windows-msvc"])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.stdout.splitlines()
        self.assertEqual(lines[:5], [
            "arch: x86_64",
            "vendor: pc",
            "os: windows",
            "env: msvc",
            "artifact: windows/x86_64/glfw.lib",
        ])
        self.assertNotIn("Loading configuration", result.stdout)

    def test_resolve_without_library(self):
        result = self.runner.invoke(cli, ["--path", self.test_dir, "resolve", "aarch64-unknown-linux-gnu"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("artifact-dir: linux/aarch64", result.stdout.splitlines())

    def test_resolve_uses_project_vocabulary(self):
        config.save_config({"vocabulary": {"architectures": ["e2k"]}}, path=self.test_dir)
        result = self.runner.invoke(cli, ["--path", self.test_dir, "resolve", "e2k-unknown-linux-gnu"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("arch: e2k", result.stdout.splitlines())

    def test_resolve_malformed(self):
        result = self.runner.invoke(cli, ["--path", self.test_dir, "resolve", "windows-x86_64"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid target triple 'windows-x86_64'", result.output)

    @patch("click.edit")
    def test_config_edit(self, mock_edit):
        config.save_config(config.default_config(), path=self.test_dir)
        self.runner.invoke(cli, ["--path", self.test_dir, "config", "edit"])
        mock_edit.assert_called_once_with(filename=self.config_path)

    @patch("importlib.metadata.version", return_value="0.1.0")
    def test_version(self, mock_version):
        result = self.runner.invoke(cli, ["version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("nativelink version 0.1.0", result.output)

    def test_log_list(self):
        result = self.runner.invoke(cli, ["log", "--list"])
        self.assertEqual(result.exit_code, 0)
        self.assertTrue("Available log files:" in result.output or "No log files found." in result.output)


if __name__ == "__main__":
    unittest.main()
