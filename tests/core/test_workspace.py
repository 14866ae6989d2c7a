from __future__ import annotations

from pathlib import Path

import pytest

from quiz_trainer.core import workspace


def test_ensure_workspace_creates_directories(tmp_path, monkeypatch):
    root = tmp_path / "data"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert set(layout.directories) == {"config", "logs", "data"}
    for name, path in layout.items():
        assert path.is_dir()
        assert path.parent == layout.home
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path, monkeypatch):
    root = tmp_path / "existing"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    first = workspace.ensure_workspace()
    second = workspace.ensure_workspace()

    assert first.home == second.home
    assert all(not created for created in second.created.values())


def test_ensure_workspace_respects_custom_path(tmp_path):
    custom = tmp_path / "custom-root"

    layout = workspace.ensure_workspace(path=custom)

    assert layout.home == custom.resolve()
    assert (custom / "data").is_dir()


def test_ensure_workspace_without_create(tmp_path, monkeypatch):
    root = tmp_path / "deferred"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace(create=False)

    assert layout.home == root.resolve()
    assert not root.exists()
    assert all(not created for created in layout.created.values())


def test_describe_layout_returns_mapping(tmp_path, monkeypatch):
    root = tmp_path / "layout"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    mapping = workspace.describe_layout()

    assert mapping["home"] == root.resolve()
    assert mapping["data"] == root.resolve() / "data"
    assert not root.exists()


def test_ensure_workspace_errors_when_path_is_file(tmp_path, monkeypatch):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace()


def test_subdirectory_that_is_a_file_errors(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    (root / "logs").write_text("oops", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError, match="logs"):
        workspace.ensure_workspace(path=root)
    with pytest.raises(workspace.WorkspaceError, match="logs"):
        workspace.ensure_workspace(path=root, create=False)


def test_path_for_unknown_key_errors(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path / "ws", create=False)

    with pytest.raises(KeyError):
        layout.path_for("unknown")


def test_ensure_workspace_uses_env_mapping(tmp_path):
    env_home = tmp_path / "env-home"

    layout = workspace.ensure_workspace(env={workspace.WORKSPACE_ENV: str(env_home)})

    assert layout.home == env_home.resolve()


def test_workspace_fallback_on_permission(tmp_path, monkeypatch):
    fallback = tmp_path / "fallback"
    monkeypatch.setattr(workspace, "_fallback_base", lambda: fallback)
    real_ensure_dir = workspace._ensure_dir

    def fake_ensure_dir(path: Path) -> bool:
        if path == workspace.DEFAULT_WORKSPACE.resolve():
            raise PermissionError("denied")
        return real_ensure_dir(path)

    monkeypatch.setattr(workspace, "_ensure_dir", fake_ensure_dir)
    monkeypatch.delenv(workspace.WORKSPACE_ENV, raising=False)

    layout = workspace.ensure_workspace()

    assert layout.home == fallback
    assert layout.created["home"] is True


def test_explicit_root_never_falls_back(tmp_path, monkeypatch):
    monkeypatch.setattr(workspace, "_fallback_base", lambda: tmp_path / "fb")

    def deny(path: Path) -> bool:
        raise PermissionError("nope")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=tmp_path / "explicit")
    assert not (tmp_path / "fb").exists()


def test_workspace_error_when_all_candidates_fail(tmp_path, monkeypatch):
    monkeypatch.setattr(workspace, "_fallback_base", lambda: tmp_path / "fb")
    monkeypatch.delenv(workspace.WORKSPACE_ENV, raising=False)

    def deny(path: Path) -> bool:
        raise PermissionError("nope")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace()


def test_ensure_dir_sets_private_permissions(tmp_path):
    target = tmp_path / "private"

    assert workspace._ensure_dir(target) is True
    assert target.stat().st_mode & 0o777 == 0o700
    assert workspace._ensure_dir(target) is False
