from __future__ import annotations

import json
import unittest
from pathlib import Path

from version_sync.exceptions import InputError
from version_sync.patchers import (
    find_version_line,
    format_version_line,
    patch_json_document,
    patch_version_line,
)

CARGO_TOML = """[package]
name = "bookmarks"
version = "1.0.0"
description = "A Tauri App"
edition = "2021"

[dependencies]
serde = { version = "1", features = ["derive"] }
tauri = { version = "2" }
"""


class JsonPatchTests(unittest.TestCase):
    path = Path("tauri.conf.json")

    def test_replaces_version_and_keeps_other_fields(self) -> None:
        old, new_text = patch_json_document(
            '{"version": "1.0.0", "name": "app"}', "1.2.3", self.path
        )
        self.assertEqual(old, "1.0.0")
        self.assertEqual(new_text, '{\n  "version": "1.2.3",\n  "name": "app"\n}')

    def test_preserves_key_order_of_nested_document(self) -> None:
        source = {
            "$schema": "https://schema.tauri.app/config/2",
            "productName": "bookmarks",
            "version": "0.1.0",
            "identifier": "com.example.bookmarks",
            "build": {"beforeDevCommand": "npm run dev", "devUrl": "http://localhost:1420"},
            "app": {"windows": [{"title": "bookmarks", "width": 800}]},
        }
        _old, new_text = patch_json_document(json.dumps(source), "0.2.0", self.path)
        patched = json.loads(new_text)
        self.assertEqual(list(patched), list(source))
        self.assertEqual(patched["version"], "0.2.0")
        for key in source:
            if key != "version":
                self.assertEqual(patched[key], source[key])

    def test_no_trailing_newline_and_two_space_indent(self) -> None:
        _old, new_text = patch_json_document('{"version": "1"}\n', "2", self.path)
        self.assertFalse(new_text.endswith("\n"))
        self.assertIn('\n  "version": "2"', new_text)

    def test_non_ascii_written_unescaped(self) -> None:
        _old, new_text = patch_json_document(
            '{"version": "1.0.0", "productName": "书签管理"}', "1.0.1", self.path
        )
        self.assertIn("书签管理", new_text)

    def test_same_version_is_semantic_no_op(self) -> None:
        old, new_text = patch_json_document('{"version": "1.2.3", "a": 1}', "1.2.3", self.path)
        self.assertEqual(old, "1.2.3")
        self.assertEqual(json.loads(new_text), {"version": "1.2.3", "a": 1})

    def test_missing_version_field_raises(self) -> None:
        with self.assertRaisesRegex(InputError, "no \"version\" field"):
            patch_json_document('{"name": "app"}', "1.2.3", self.path)

    def test_non_object_document_raises(self) -> None:
        with self.assertRaisesRegex(InputError, "top level must be an object"):
            patch_json_document('["version"]', "1.2.3", self.path)

    def test_invalid_json_raises_input_error(self) -> None:
        with self.assertRaisesRegex(InputError, "Invalid JSON at tauri.conf.json"):
            patch_json_document('{"version": ', "1.2.3", self.path)


class VersionLinePatchTests(unittest.TestCase):
    path = Path("Cargo.toml")

    def test_rewrites_package_version_line(self) -> None:
        old, old_version, new_text = patch_version_line(CARGO_TOML, "1.2.3", self.path)
        self.assertEqual(old, 'version = "1.0.0"')
        self.assertEqual(old_version, "1.0.0")
        self.assertIn('\nversion = "1.2.3"\n', new_text)

    def test_other_lines_are_byte_identical(self) -> None:
        _old, _value, new_text = patch_version_line(CARGO_TOML, "9.9.9", self.path)
        before = CARGO_TOML.splitlines(keepends=True)
        after = new_text.splitlines(keepends=True)
        self.assertEqual(len(before), len(after))
        changed = [i for i, (a, b) in enumerate(zip(before, after)) if a != b]
        self.assertEqual(changed, [2])

    def test_only_first_match_is_rewritten(self) -> None:
        text = 'version = "1.0.0"\n[workspace.package]\nversion = "1.0.0"\n'
        _old, _value, new_text = patch_version_line(text, "2.0.0", self.path)
        self.assertEqual(new_text, 'version = "2.0.0"\n[workspace.package]\nversion = "1.0.0"\n')

    def test_match_is_anchored_at_line_start(self) -> None:
        text = '[dependencies]\n  version = "0.0.1"\nserde = { version = "1" }\n'
        self.assertIsNone(find_version_line(text))

    def test_loose_spacing_is_normalized(self) -> None:
        old, old_version, new_text = patch_version_line('version="1.0.0"\n', "1.0.1", self.path)
        self.assertEqual(old, 'version="1.0.0"')
        self.assertEqual(old_version, "1.0.0")
        self.assertEqual(new_text, 'version = "1.0.1"\n')

    def test_version_inserted_literally(self) -> None:
        _old, _value, new_text = patch_version_line('version = "1"\n', r"1.0.0-\1+g\n", self.path)
        self.assertEqual(new_text, 'version = "1.0.0-\\1+g\\n"\n')

    def test_crlf_line_endings_preserved(self) -> None:
        text = '[package]\r\nversion = "1.0.0"\r\nedition = "2021"\r\n'
        _old, _value, new_text = patch_version_line(text, "1.1.0", self.path)
        self.assertEqual(new_text, '[package]\r\nversion = "1.1.0"\r\nedition = "2021"\r\n')

    def test_missing_pattern_raises(self) -> None:
        with self.assertRaisesRegex(InputError, "no line matching"):
            patch_version_line('[package]\nname = "x"\n', "1.0.0", self.path)

    def test_format_version_line(self) -> None:
        self.assertEqual(format_version_line("3.1.4"), 'version = "3.1.4"')


if __name__ == "__main__":
    unittest.main()
