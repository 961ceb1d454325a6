"""Tests for marksite.paths — content-root resolution precedence."""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from marksite import paths
from marksite.config import CONTENT_DIR_ENV
from marksite.paths import (
    LEGACY_WARNING,
    ResolutionSource,
    resolve,
    resolve_content_root,
)

# Value each source yields when present
_FLAG = "from-flag"
_ENV = "from-env"
_ROOT_CONFIG = "from-config"


def _arrange(
    cwd: Path,
    *,
    flag: bool,
    env: bool,
    root_config: bool,
    legacy: bool,
) -> tuple[str | None, dict[str, str]]:
    if root_config:
        (cwd / "config.yaml").write_text(f"contentDir: ./{_ROOT_CONFIG}\n")
    if legacy:
        (cwd / "content").mkdir()
    environ = {CONTENT_DIR_ENV: _ENV} if env else {}
    return (_FLAG if flag else None), environ


def _expected(cwd: Path, present: tuple[bool, bool, bool, bool]) -> tuple[Path, ResolutionSource]:
    flag, env, root_config, legacy = present
    if flag:
        return cwd / _FLAG, ResolutionSource.FLAG
    if env:
        return cwd / _ENV, ResolutionSource.ENVIRONMENT
    if root_config:
        return cwd / _ROOT_CONFIG, ResolutionSource.ROOT_CONFIG
    if legacy:
        return cwd, ResolutionSource.LEGACY_LAYOUT
    return cwd / "blog-data", ResolutionSource.DEFAULT


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestPrecedence:
    """The highest-priority present source always wins."""

    @pytest.mark.parametrize(
        "present",
        list(itertools.product([True, False], repeat=4)),
        ids=lambda p: "-".join(
            name for name, on in zip(("flag", "env", "config", "legacy"), p) if on
        ) or "nothing",
    )
    def test_every_combination(
        self, tmp_path: Path, present: tuple[bool, bool, bool, bool],
    ) -> None:
        cwd = tmp_path.resolve()
        flag, env, root_config, legacy = present
        explicit, environ = _arrange(
            cwd, flag=flag, env=env, root_config=root_config, legacy=legacy,
        )

        result = resolve(explicit, cwd=cwd, environ=environ)

        expected_path, expected_source = _expected(cwd, present)
        assert result.path == expected_path
        assert result.source is expected_source
        assert result.path.is_absolute()

    def test_lower_sources_not_consulted_after_flag(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _boom(_cwd: Path) -> str:
            raise AssertionError("root config consulted")

        monkeypatch.setattr(paths, "read_root_content_dir", _boom)
        result = resolve("explicit", cwd=tmp_path, environ={CONTENT_DIR_ENV: "env"})
        assert result.source is ResolutionSource.FLAG

    def test_lower_sources_not_consulted_after_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _boom(_cwd: Path) -> str:
            raise AssertionError("root config consulted")

        monkeypatch.setattr(paths, "read_root_content_dir", _boom)
        result = resolve(None, cwd=tmp_path, environ={CONTENT_DIR_ENV: "env"})
        assert result.source is ResolutionSource.ENVIRONMENT

    def test_legacy_not_checked_after_root_config(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "config.yaml").write_text("contentDir: data\n")
        (tmp_path / "content").mkdir()
        resolve(None, cwd=tmp_path, environ={})
        assert LEGACY_WARNING not in capsys.readouterr().err

    def test_empty_flag_falls_through(self, tmp_path: Path) -> None:
        result = resolve("", cwd=tmp_path, environ={CONTENT_DIR_ENV: "env"})
        assert result.source is ResolutionSource.ENVIRONMENT

    def test_empty_env_falls_through(self, tmp_path: Path) -> None:
        result = resolve(None, cwd=tmp_path, environ={CONTENT_DIR_ENV: ""})
        assert result.source is ResolutionSource.DEFAULT


# ---------------------------------------------------------------------------
# Individual sources
# ---------------------------------------------------------------------------


class TestSources:
    def test_default_when_nothing_configured(self, tmp_path: Path) -> None:
        path = resolve_content_root(cwd=tmp_path, environ={})
        assert path == (tmp_path / "blog-data").resolve()
        assert path.is_absolute()

    def test_legacy_layout_returns_cwd_and_warns(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "content").mkdir()
        result = resolve(cwd=tmp_path, environ={})
        assert result.path == tmp_path.resolve()
        assert result.source is ResolutionSource.LEGACY_LAYOUT
        assert "legacy content structure" in capsys.readouterr().err

    def test_malformed_root_config_is_swallowed(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "config.yaml").write_text("contentDir: [broken\n")
        result = resolve(cwd=tmp_path, environ={})
        assert result.source is ResolutionSource.DEFAULT
        assert capsys.readouterr().err == ""

    def test_absolute_flag_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere"
        result = resolve(str(target), cwd=tmp_path / "cwd", environ={})
        assert result.path == target.resolve()

    def test_relative_flag_resolved_against_cwd(self, tmp_path: Path) -> None:
        result = resolve("../data", cwd=tmp_path / "project", environ={})
        assert result.path == (tmp_path / "data").resolve()

    def test_pathlike_flag(self, tmp_path: Path) -> None:
        result = resolve(Path("data"), cwd=tmp_path, environ={})
        assert result.path == (tmp_path / "data").resolve()

    def test_reads_process_environment_by_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv(CONTENT_DIR_ENV, "env-data")
        monkeypatch.chdir(tmp_path)
        result = resolve()
        assert result.path == (tmp_path / "env-data").resolve()
        assert result.source is ResolutionSource.ENVIRONMENT
