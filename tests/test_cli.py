"""Tests for the gachi command-line interface."""

import json

import pytest

from gachiscript.cli import build_options, build_parser, main
from gachiscript.dictionary import build_default_table
from gachiscript.transpiler import Framework


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GACHI_FRAMEWORK", "GACHI_STRICT_MODE", "GACHI_PRESERVE_COMMENTS",
                 "GACHI_RANDOM_QUOTES", "GACHI_SEED", "GACHI_DIALECT"):
        monkeypatch.delenv(name, raising=False)


class TestOptions:
    """Tests for flag and environment merging."""

    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("GACHI_FRAMEWORK", "vue")
        monkeypatch.setenv("GACHI_STRICT_MODE", "1")
        args = build_parser().parse_args(["to-gachi", "src", "--framework", "react", "--no-comments"])

        options = build_options(args)

        assert options.framework == Framework.REACT
        assert options.strict_mode
        assert not options.preserve_comments

    def test_env_defaults(self, monkeypatch):
        monkeypatch.setenv("GACHI_FRAMEWORK", "angular")
        args = build_parser().parse_args(["to-js", "build"])
        assert build_options(args).framework == Framework.ANGULAR


class TestTransformCommands:
    """Tests for to-gachi and to-js."""

    def test_to_gachi_and_back(self, tmp_path, capsys):
        src = tmp_path / "src"
        src.mkdir()
        (src / "app.js").write_text("const a = 1;\n", encoding="utf-8")
        out = tmp_path / "out"
        restored = tmp_path / "restored"

        assert main(["to-gachi", str(src), "--out-dir", str(out)]) == 0
        assert (out / "app.gachi").read_text(encoding="utf-8") == "firmConst a = 1;\n"
        assert "1/1 files transformed" in capsys.readouterr().out

        assert main(["to-js", str(out), "-o", str(restored)]) == 0
        assert (restored / "app.js").read_text(encoding="utf-8") == "const a = 1;\n"

    def test_failed_file_sets_exit_code(self, tmp_path, capsys):
        (tmp_path / "bad.js").write_text("function (", encoding="utf-8")

        assert main(["to-gachi", str(tmp_path)]) == 1
        assert "FAIL" in capsys.readouterr().out
        assert not (tmp_path / "bad.gachi").exists()

    def test_no_files(self, tmp_path, capsys):
        assert main(["to-js", str(tmp_path)]) == 1
        assert "No matching files" in capsys.readouterr().out


class TestValidateCommand:
    """Tests for validate."""

    def test_valid(self, tmp_path, capsys):
        path = tmp_path / "ok.gachi"
        path.write_text("firmConst a = 1;", encoding="utf-8")
        assert main(["validate", str(path)]) == 0
        assert "valid GachiScript" in capsys.readouterr().out

    def test_invalid(self, tmp_path, capsys):
        path = tmp_path / "bad.gachi"
        path.write_text("firmConst café = 1;", encoding="utf-8")
        assert main(["validate", str(path)]) == 1
        assert 'Unknown GachiScript keyword: "café"' in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["validate", str(tmp_path / "nope.gachi")]) == 1
        assert capsys.readouterr().out.startswith("Error:")


class TestDetectCommand:
    def test_detect(self, tmp_path, capsys):
        path = tmp_path / "App.tsx"
        path.write_text("import React from 'react';", encoding="utf-8")
        assert main(["detect", str(path)]) == 0
        assert capsys.readouterr().out.strip() == "react"


class TestDictionaryCommand:
    """Tests for dictionary stats/export/check."""

    def test_stats(self, capsys):
        assert main(["dictionary", "stats", "--framework", "react"]) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats["total_mappings"] == len(build_default_table("react"))
        assert stats["collisions"] == 0

    def test_export_and_check(self, tmp_path, capsys):
        path = tmp_path / "dict.json"
        assert main(["dictionary", "export", "--output", str(path)]) == 0
        capsys.readouterr()

        assert main(["dictionary", "check", "--dictionary", str(path)]) == 0
        assert capsys.readouterr().out.startswith("No collisions in")

    def test_check_reports_collisions(self, tmp_path, capsys):
        table = build_default_table()
        table.add("greet", "firmConst")
        path = tmp_path / "dict.json"
        path.write_text(table.to_json(), encoding="utf-8")

        assert main(["dictionary", "check", "--dictionary", str(path)]) == 1
        assert "Mapping collision" in capsys.readouterr().out

    def test_invalid_dictionary(self, tmp_path, capsys):
        path = tmp_path / "dict.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["dictionary", "stats", "--dictionary", str(path)]) == 1
        assert "Dictionary is not valid JSON" in capsys.readouterr().out

    def test_custom_dictionary_drives_transform(self, tmp_path, capsys):
        table = build_default_table()
        table.add("greet", "salute")
        dictionary = tmp_path / "dict.json"
        dictionary.write_text(table.to_json(), encoding="utf-8")
        source = tmp_path / "src" / "a.js"
        source.parent.mkdir()
        source.write_text("greet();", encoding="utf-8")

        assert main(["to-gachi", str(source), "--dictionary", str(dictionary)]) == 0
        assert (source.parent / "a.gachi").read_text(encoding="utf-8") == "salute();"
