import sys
import types

import pytest

from quiz_trainer import cli


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "quiz-trainer"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def _stub_module(expected: str, main):
    def fake_import(module_name: str):
        assert module_name == expected
        return types.SimpleNamespace(main=main, config_main=main)

    return fake_import


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: quiz" in captured.out
    assert "Available commands:" in captured.out


def test_help_flag_shows_usage(capsys):
    code = cli.main(["--help"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: quiz" in captured.out


def test_help_command_without_target(capsys):
    code = cli.main(["help"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: quiz" in captured.out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Available commands:" in captured.out
    for name in ("init", "config", "shell"):
        assert name in captured.out
    assert "(interactive)" in captured.out


def test_help_known_command(capsys):
    code = cli.main(["help", "shell"])
    captured = capsys.readouterr()
    assert code == 0
    assert "shell: Start the interactive quiz trainer." in captured.out
    assert "Run `quiz shell --help`" in captured.out


def test_help_unknown_command(capsys):
    code = cli.main(["help", "does-not-exist"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command" in captured.err
    assert "Available commands:" in captured.err


@pytest.mark.parametrize("flag", ["version", "--version", "-V"])
def test_version_command(flag, capsys):
    code = cli.main([flag])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "0.0-test"


def test_unknown_command_errors(capsys):
    code = cli.main(["bogus"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'bogus'" in captured.err
    assert "Available commands:" in captured.err


def test_dispatch_invokes_module_main_with_passthrough(monkeypatch):
    before = list(sys.argv)
    captured: dict[str, list[str]] = {}

    def stub_main(argv):
        captured["argv"] = list(argv)
        captured["sys_argv"] = list(sys.argv)
        return 7

    monkeypatch.setattr(
        cli, "import_module", _stub_module("quiz_trainer.quizzer._main", stub_main)
    )
    code = cli.main(["shell", "--store", "x.json"])
    assert code == 7
    assert captured["argv"] == ["--store", "x.json"]
    assert captured["sys_argv"] == ["quiz shell", "--store", "x.json"]
    assert list(sys.argv) == before


def test_dispatch_supports_main_without_parameters(monkeypatch):
    called = {"count": 0}

    def stub_main():
        called["count"] += 1
        assert sys.argv[0] == "quiz init"

    monkeypatch.setattr(
        cli, "import_module", _stub_module("quiz_trainer.workspace.cli", stub_main)
    )
    code = cli.main(["init"])
    assert code == 0
    assert called["count"] == 1


@pytest.mark.parametrize(
    "exit_value, expected",
    [(5, 5), (None, 0), ("boom", 1)],
)
def test_dispatch_normalizes_system_exit(monkeypatch, capsys, exit_value, expected):
    def stub_main(argv):
        raise SystemExit(exit_value)

    monkeypatch.setattr(
        cli, "import_module", _stub_module("quiz_trainer.quizzer._main", stub_main)
    )
    code = cli.main(["config", "validate"])
    assert code == expected
    if exit_value == "boom":
        assert capsys.readouterr().err.strip() == "boom"


def test_dispatch_normalizes_non_int_return(monkeypatch):
    monkeypatch.setattr(
        cli,
        "import_module",
        _stub_module("quiz_trainer.workspace.cli", lambda argv: "done"),
    )
    assert cli.main(["init"]) == 0


def test_quiz_cli_runs_init_end_to_end(tmp_path, capsys):
    target = tmp_path / "workspace"

    code = cli.main(["init", "--path", str(target)])

    captured = capsys.readouterr()
    assert code == 0
    assert "Workspace ready" in captured.out
    for entry in ("config", "logs", "data"):
        assert (target / entry).is_dir()


def test_quiz_cli_runs_config_init(tmp_path, capsys):
    code = cli.main(["config", "init", "--workspace", str(tmp_path)])

    captured = capsys.readouterr()
    assert code == 0
    target = tmp_path / "config" / "quiz.toml"
    assert target.exists()
    assert str(target) in captured.out


def test_quiz_cli_config_requires_subcommand(capsys):
    code = cli.main(["config"])

    assert code == 2
    assert "usage: quiz config" in capsys.readouterr().err
