import os
import shutil
import tempfile
import unittest

from click.testing import CliRunner

from nativelink import config
from nativelink.main import cli
from nativelink.registry import load_registry
from nativelink.triple import resolve


def write_artifact(test_dir, *parts):
    path = os.path.join(test_dir, "deps", *parts)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(b"!<arch>\n")
    return path


class OverridesTestCase(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.test_dir = tempfile.mkdtemp()
        config.save_config(config.default_config(), path=self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def invoke(self, *args):
        return self.runner.invoke(cli, ["--path", self.test_dir, *args])


class TestAddOverride(OverridesTestCase):

    def test_add_override(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        result = self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        self.assertEqual(result.exit_code, 0, result.output)
        cfg = load_registry(self.test_dir).lookup(resolve("x86_64-pc-windows-msvc"))
        self.assertEqual(cfg.artifact, "windows/x86_64/glfw3.lib")
        self.assertEqual(cfg.library, "glfw3")
        self.assertEqual(cfg.kind, "static")

    def test_add_override_keeps_other_settings(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        conf = config.load_config(self.test_dir)
        self.assertEqual(conf["dependency"]["name"], "glfw")
        self.assertEqual(conf["store"]["root"], "deps")

    def test_add_override_conventional_path(self):
        write_artifact(self.test_dir, "linux", "x86_64", "libglfw3.a")
        result = self.invoke("add-override", "x86_64-unknown-linux-gnu", "--library", "glfw3")
        self.assertEqual(result.exit_code, 0, result.output)
        cfg = load_registry(self.test_dir).lookup(resolve("x86_64-unknown-linux-gnu"))
        self.assertEqual(cfg.artifact, "linux/x86_64/libglfw3.a")

    def test_add_override_missing_artifact(self):
        result = self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("x86_64-pc-windows-msvc", result.output)
        self.assertEqual(len(load_registry(self.test_dir)), 0)

    def test_add_override_outside_store(self):
        with open(os.path.join(self.test_dir, "glfw3.lib"), "wb") as f:
            f.write(b"")
        result = self.invoke("add-override", "x86_64-pc-windows-msvc", "../glfw3.lib")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("must be relative to and inside the store", result.output)

    def test_add_override_invalid_triple(self):
        result = self.invoke("add-override", "windows-x86_64", "windows/x86_64/glfw3.lib")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid target triple", result.output)

    def test_add_existing_override_needs_force(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3dll.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")

        result = self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3dll.lib",
                             "--kind", "dylib")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("already exists", result.output)

        result = self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3dll.lib",
                             "--kind", "dylib", "--library", "glfw3", "--force")
        self.assertEqual(result.exit_code, 0, result.output)
        cfg = load_registry(self.test_dir).lookup(resolve("x86_64-pc-windows-msvc"))
        self.assertEqual((cfg.artifact, cfg.library, cfg.kind), ("windows/x86_64/glfw3dll.lib", "glfw3", "dylib"))


class TestRemoveOverride(OverridesTestCase):

    def test_remove_override(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        result = self.invoke("remove-override", "x86_64-pc-windows-msvc")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertNotIn(resolve("x86_64-pc-windows-msvc"), load_registry(self.test_dir))
        # The artifact itself stays in the store.
        self.assertTrue(os.path.exists(os.path.join(self.test_dir, "deps", "windows", "x86_64", "glfw3.lib")))

    def test_remove_unknown_override(self):
        result = self.invoke("remove-override", "aarch64-unknown-linux-gnu")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No override configured for target 'aarch64-unknown-linux-gnu'", result.output)


class TestListOverrides(OverridesTestCase):

    def test_list_empty(self):
        result = self.invoke("list-overrides")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("No overrides registered yet", result.output)

    def test_list_marks_missing(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        os.remove(os.path.join(self.test_dir, "deps", "windows", "x86_64", "glfw3.lib"))
        result = self.invoke("list-overrides")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("x86_64-pc-windows-msvc", result.output)
        self.assertIn("[missing]", result.output)


class TestCheck(OverridesTestCase):

    def test_check_clean(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        result = self.invoke("check")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("All overrides point at artifacts in the store.", result.output)

    def test_check_missing_artifact(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "windows/x86_64/glfw3.lib")
        os.remove(os.path.join(self.test_dir, "deps", "windows", "x86_64", "glfw3.lib"))
        result = self.invoke("check")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("x86_64-pc-windows-msvc: artifact missing", result.output)

    def test_check_reports_unreferenced_and_unconventional(self):
        write_artifact(self.test_dir, "windows", "x86_64", "glfw3.lib")
        write_artifact(self.test_dir, "win64", "glfw3.lib")
        self.invoke("add-override", "x86_64-pc-windows-msvc", "win64/glfw3.lib")
        result = self.invoke("check")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("does not follow the store layout (expected windows/x86_64/glfw3.lib)", result.output)
        self.assertIn("windows/x86_64/glfw3.lib is not referenced by any override", result.output)

    def test_check_treats_framework_as_one_artifact(self):
        write_artifact(self.test_dir, "macos", "aarch64", "GLFW.framework", "GLFW")
        write_artifact(self.test_dir, "macos", "aarch64", "GLFW.framework", "Headers", "glfw3.h")
        conf = config.load_config(self.test_dir)
        conf["target"] = {
            "aarch64-apple-darwin-macabi": {
                "artifact": "macos/aarch64/GLFW.framework",
                "library": "GLFW",
                "kind": "framework",
            },
        }
        config.save_config(conf, path=self.test_dir)
        result = self.invoke("check")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertNotIn("not referenced", result.output)
        self.assertIn("All overrides point at artifacts in the store.", result.output)


if __name__ == "__main__":
    unittest.main()
