"""Tests for the command-line entry point (cargo_setup.cli)."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from cargo_setup.cli import EXIT_FATAL, EXIT_OK, EXIT_USAGE, build_parser, main
from cargo_setup.models import CrateKind

pytestmark = pytest.mark.unit


def _package(root: Path) -> dict:
    return tomllib.loads((root / "Cargo.toml").read_text(encoding="utf-8"))["package"]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["demo"])
        assert args.name == "demo"
        assert args.kind is CrateKind.LIB
        assert args.license is None
        assert args.profile is None
        assert args.path is None

    def test_bin_flag(self):
        assert build_parser().parse_args(["demo", "--bin"]).kind is CrateKind.BIN

    def test_bin_and_lib_are_exclusive(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["demo", "--bin", "--lib"])
        assert excinfo.value.code == 2
        assert "not allowed with argument" in capsys.readouterr().err

    def test_name_is_required(self):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args([])
        assert excinfo.value.code == 2


class TestMain:
    def test_success(self, make_fake_cargo, tmp_path, profile_file, capsys):
        creator = make_fake_cargo()
        code = main(
            ["shortid-rs", "--bin", "--path", str(tmp_path), "--profile", str(profile_file)],
            creator=creator,
        )
        assert code == EXIT_OK
        out, err = capsys.readouterr()
        assert "Scaffolded project `shortid-rs` with license `MIT` and extras." in out
        assert "Warning" not in err
        assert creator.calls == [("shortid-rs", CrateKind.BIN, tmp_path)]
        assert _package(tmp_path / "shortid-rs")["authors"] == ["JD Plumbing <jd@example.com>"]

    def test_setup_prefix_is_skipped(self, make_fake_cargo, tmp_path, profile_file):
        creator = make_fake_cargo()
        code = main(
            ["setup", "demo", "--path", str(tmp_path), "--profile", str(profile_file)],
            creator=creator,
        )
        assert code == EXIT_OK
        assert creator.calls[0][0] == "demo"

    def test_crate_named_setup(self, make_fake_cargo, tmp_path, profile_file):
        creator = make_fake_cargo()
        code = main(
            ["setup", "--bin", "--path", str(tmp_path), "--profile", str(profile_file)],
            creator=creator,
        )
        assert code == EXIT_OK
        assert creator.calls == [("setup", CrateKind.BIN, tmp_path)]

    def test_cargo_subcommand_named_setup(self, make_fake_cargo, tmp_path, profile_file, monkeypatch):
        monkeypatch.setenv("CARGO", "/usr/bin/cargo")
        creator = make_fake_cargo()
        code = main(
            ["setup", "setup", "--path", str(tmp_path), "--profile", str(profile_file)],
            creator=creator,
        )
        assert code == EXIT_OK
        assert creator.calls[0][0] == "setup"

    def test_bare_cargo_subcommand_needs_a_name(self, monkeypatch):
        monkeypatch.setenv("CARGO", "/usr/bin/cargo")
        with pytest.raises(SystemExit) as excinfo:
            main(["setup"])
        assert excinfo.value.code == 2

    def test_whitespace_default_license_env_is_ignored(self, make_fake_cargo, tmp_path, monkeypatch):
        monkeypatch.setenv("CARGO_SETUP_DEFAULT_LICENSE", "   ")
        code = main(
            ["demo", "--path", str(tmp_path), "--profile", str(tmp_path / "none.toml")],
            creator=make_fake_cargo(),
        )
        assert code == EXIT_OK
        assert _package(tmp_path / "demo")["license"] == "MIT"

    def test_missing_profile_warns(self, make_fake_cargo, tmp_path, capsys):
        code = main(
            ["demo", "--path", str(tmp_path), "--profile", str(tmp_path / "none.toml")],
            creator=make_fake_cargo(),
        )
        assert code == EXIT_OK
        out, err = capsys.readouterr()
        assert "Warning: No profile at" in err
        assert "and extras." in out

    def test_default_kind_is_lib(self, make_fake_cargo, tmp_path, profile_file):
        main(["demo", "--path", str(tmp_path), "--profile", str(profile_file)], creator=make_fake_cargo())
        assert (tmp_path / "demo" / "src" / "lib.rs").is_file()

    def test_license_flag(self, make_fake_cargo, tmp_path, profile_file, capsys):
        code = main(
            ["demo", "--license", "Apache-2.0", "--path", str(tmp_path), "--profile", str(profile_file)],
            creator=make_fake_cargo(),
        )
        assert code == EXIT_OK
        assert _package(tmp_path / "demo")["license"] == "Apache-2.0"
        assert "license `Apache-2.0`" in capsys.readouterr().out

    def test_cwd_is_default_location(self, make_fake_cargo, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CARGO_SETUP_PROFILE", str(tmp_path / "missing.toml"))
        assert main(["demo"], creator=make_fake_cargo()) == EXIT_OK
        assert (tmp_path / "demo" / "Cargo.toml").is_file()

    def test_profile_from_environment(self, make_fake_cargo, tmp_path, profile_file, monkeypatch):
        monkeypatch.setenv("CARGO_SETUP_PROFILE", str(profile_file))
        main(["demo", "--path", str(tmp_path)], creator=make_fake_cargo())
        assert _package(tmp_path / "demo")["repository"] == "https://github.com/JDPlumbing/demo"

    def test_default_license_from_environment(self, make_fake_cargo, tmp_path, monkeypatch):
        monkeypatch.setenv("CARGO_SETUP_DEFAULT_LICENSE", "ISC")
        main(
            ["demo", "--path", str(tmp_path), "--profile", str(tmp_path / "none.toml")],
            creator=make_fake_cargo(),
        )
        assert _package(tmp_path / "demo")["license"] == "ISC"

    def test_invalid_name_is_usage_error(self, make_fake_cargo, tmp_path, capsys):
        creator = make_fake_cargo()
        code = main(["bad name!", "--path", str(tmp_path)], creator=creator)
        assert code == EXIT_USAGE
        assert "Error" in capsys.readouterr().err
        assert creator.calls == []

    def test_base_failure_is_fatal(self, make_fake_cargo, tmp_path, capsys):
        creator = make_fake_cargo(fail_with="error: destination already exists")
        code = main(["demo", "--path", str(tmp_path)], creator=creator)
        assert code == EXIT_FATAL
        out, err = capsys.readouterr()
        assert "destination already exists" in err
        assert "Scaffolded" not in out
        assert list(tmp_path.iterdir()) == []

    def test_missing_cargo_is_fatal(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("CARGO_SETUP_CARGO", "definitely-not-cargo-xyz")
        code = main(["demo", "--path", str(tmp_path)])
        assert code == EXIT_FATAL
        assert "not found on PATH" in capsys.readouterr().err

    def test_partial_failure_still_exits_zero(self, make_fake_cargo, tmp_path, profile_file, capsys):
        def _block_github_dir(root: Path) -> None:
            (root / ".github").write_text("", encoding="utf-8")

        code = main(
            ["demo", "--path", str(tmp_path), "--profile", str(profile_file)],
            creator=make_fake_cargo(after_create=_block_github_dir),
        )
        assert code == EXIT_OK
        out, err = capsys.readouterr()
        assert "Warning: Could not write .github/workflows/ci.yml" in err
        assert "1 warning(s)" in err
        assert "and extras." not in out
        assert (tmp_path / "demo" / "README.md").is_file()

    def test_malformed_profile_warns_but_succeeds(self, make_fake_cargo, tmp_path, capsys):
        bad = tmp_path / "bad.toml"
        bad.write_text("name = [", encoding="utf-8")
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        code = main(["demo", "--path", str(out_dir), "--profile", str(bad)], creator=make_fake_cargo())
        assert code == EXIT_OK
        _out, err = capsys.readouterr()
        assert "Warning: Ignoring malformed profile" in err
        assert _package(out_dir / "demo")["license"] == "MIT"
