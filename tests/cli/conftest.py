"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest

from bevyrly.config import loader


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's ~/.config/bevyrly out of CLI runs."""
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")


@pytest.fixture
def bevy_project(tmp_path: Path) -> Path:
    """Create a Rust project with two systems."""
    root = tmp_path / "game"
    (root / "src").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "game"\n')
    (root / "src" / "ships.rs").write_text(
        "fn move_ships(q: Query<(&Transform, &mut Velocity), With<Player>>) {\n"
        "    q.iter();\n"
        "}\n"
        "\n"
        "fn hide_ships(q: Query<&mut Visibility, Without<Player>>) {}\n"
    )
    return root
