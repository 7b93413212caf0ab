from __future__ import annotations

import os
import json
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from typing import Dict, Optional

from steamvdf.shortcuts import loads_shortcuts

from vdf_fixtures import THREE_ENTRIES


PIKMIN_EXE = '"D:\\Program Files\\Dolphin\\Dolphin.exe"'
PIKMIN_ID = "11271507026838028288"


def _build_steam_tree(root: Path) -> None:
    config = root / "userdata" / "123" / "config"
    (config / "grid").mkdir(parents=True)
    (config / "shortcuts.vdf").write_bytes(THREE_ENTRIES)
    (root / "userdata" / "456").mkdir()


class CLIIntegrationTests(unittest.TestCase):
    def run_cli(self, args, *, expect: int | None = 0, extra_env: Optional[Dict[str, str]] = None):
        cmd = [sys.executable, "-m", "steamvdf.cli"] + list(args)
        env = os.environ.copy()
        env.pop("STEAMVDF_DATA_DIR", None)
        if extra_env:
            env.update(extra_env)
        repo_root = Path(__file__).resolve().parent
        existing = env.get("PYTHONPATH", "")
        env["PYTHONPATH"] = str(repo_root) if not existing else f"{repo_root}{os.pathsep}{existing}"
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
        )
        if expect is not None and proc.returncode != expect:
            raise AssertionError(
                f"CLI exited {proc.returncode}, expected {expect}\nCommand: {' '.join(cmd)}\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"
            )
        return proc

    def test_legacy_id(self):
        proc = self.run_cli(["legacy-id", "Pikmin", PIKMIN_EXE])
        self.assertEqual(proc.stdout.strip(), PIKMIN_ID)

    def test_list_existing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shortcuts.vdf"
            path.write_bytes(THREE_ENTRIES)
            proc = self.run_cli(["list", str(path)])
            self.assertIn("Application name: Chess", proc.stdout)
            self.assertIn("Tags: junk, eee", proc.stdout)
            self.assertIn("3 shortcut(s)", proc.stdout)

            as_json = json.loads(self.run_cli(["list", str(path), "--json"]).stdout)
            self.assertEqual([s["app_name"] for s in as_json], ["Chess", "Calculator", "Dolphin"])
            self.assertEqual(as_json[2]["exe_path"], "D:\\Program Files\\Dolphin\\Dolphin.exe")
            self.assertEqual(as_json[1]["launch_options"], '-one -two "-three and some"')

    def test_update_workflow(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shortcuts.vdf"

            proc = self.run_cli(["update", str(path), "Chess", "--no-create", "--exe", "/x"])
            self.assertIn("No changes were made to the file", proc.stdout)
            self.assertFalse(path.exists())

            proc = self.run_cli(
                [
                    "update",
                    str(path),
                    "Chess",
                    "--exe",
                    "/Applications/Chess.app",
                    "--start-dir",
                    "/Applications",
                    "--overlay",
                    "--tag",
                    "board",
                    "--tag",
                    "classic",
                ]
            )
            self.assertIn("Created new file", proc.stdout)
            self.assertTrue(path.read_bytes().startswith(b"\x00shortcuts\x00\x000\x00"))

            proc = self.run_cli(["update", str(path), "Chess", "--hidden", "--launch-options=-fullscreen"])
            self.assertIn("Updated existing entry in the file", proc.stdout)

            proc = self.run_cli(["update", str(path), "Calculator", "--exe", "/Applications/Calculator.app"])
            self.assertIn("Added new entry to the file", proc.stdout)

            shortcuts = loads_shortcuts(path.read_bytes())
            self.assertEqual([(s.id, s.app_name) for s in shortcuts], [(0, "Chess"), (1, "Calculator")])
            chess = shortcuts[0]
            self.assertEqual(chess.exe_path, "/Applications/Chess.app")
            self.assertEqual(chess.start_dir, "/Applications")
            self.assertTrue(chess.allow_overlay)
            self.assertTrue(chess.is_hidden)
            self.assertEqual(chess.launch_options, "-fullscreen")
            self.assertEqual(chess.tags, ["board", "classic"])

            data = json.loads(self.run_cli(["list", str(path), "--json"]).stdout)
            self.assertEqual(data[1]["exe_path"], "/Applications/Calculator.app")
            self.assertFalse(data[1]["is_hidden"])

    def test_malformed_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shortcuts.vdf"
            path.write_bytes(b"\x00shortcuts\x00\x000\x00\x07Bad\x00\x08\x08\x08\x08")
            proc = self.run_cli(["list", str(path)], expect=2)
            self.assertIn("Error:", proc.stderr)
            self.assertIn("record byte offset", proc.stderr)

            proc = self.run_cli(["update", str(path), "Chess", "--exe", "/x"], expect=2)
            self.assertIn("Error:", proc.stderr)
            self.assertEqual(path.read_bytes(), b"\x00shortcuts\x00\x000\x00\x07Bad\x00\x08\x08\x08\x08")

    def test_out_of_range_update_keeps_the_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shortcuts.vdf"
            path.write_bytes(THREE_ENTRIES)
            proc = self.run_cli(["update", str(path), "Chess", "--last-play-time", "3000000000"], expect=2)
            self.assertIn("Error:", proc.stderr)
            self.assertEqual(path.read_bytes(), THREE_ENTRIES)

    def test_missing_file(self):
        proc = self.run_cli(["list", "/definitely/not/here/shortcuts.vdf"], expect=2)
        self.assertIn("Error:", proc.stderr)

    def test_info_and_installed(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _build_steam_tree(root)

            proc = self.run_cli(["--data-dir", str(root), "info"], expect=1)
            self.assertIn("ID: 123", proc.stdout)
            self.assertIn("ID: 456", proc.stdout)
            self.assertIn("Shortcuts file:", proc.stdout)
            self.assertIn("Warning: no shortcuts file for 456", proc.stderr)

            proc = self.run_cli(["installed"], extra_env={"STEAMVDF_DATA_DIR": str(root)})
            self.assertIn("Steam is installed", proc.stdout)

            proc = self.run_cli(["installed"], expect=1, extra_env={"STEAMVDF_DATA_DIR": str(root / "missing")})
            self.assertIn("*not* installed", proc.stdout)

    def test_grid_add_and_remove(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _build_steam_tree(root)
            image = root / "cover.png"
            image.write_bytes(b"\x89PNG")
            grid = root / "userdata" / "123" / "config" / "grid"

            proc = self.run_cli(["--data-dir", str(root), "grid-add", str(image), "Pikmin", PIKMIN_EXE, "--user", "123"])
            self.assertIn(PIKMIN_ID, proc.stdout)
            self.assertEqual((grid / (PIKMIN_ID + ".png")).read_bytes(), b"\x89PNG")

            proc = self.run_cli(["--data-dir", str(root), "grid-remove", "Pikmin", PIKMIN_EXE, "--user", "123"])
            self.assertIn("Removed 1 grid image(s)", proc.stdout)
            self.assertFalse((grid / (PIKMIN_ID + ".png")).exists())

            # user 456 has no grid directory
            proc = self.run_cli(["--data-dir", str(root), "grid-add", str(image), "Pikmin", PIKMIN_EXE], expect=2)
            self.assertIn("Error:", proc.stderr)


if __name__ == "__main__":
    unittest.main()
