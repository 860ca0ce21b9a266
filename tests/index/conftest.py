"""Shared fixtures for index tests."""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from bevyrly.index.models import (
    FunctionDecl,
    Param,
    SourceSpan,
    SourceText,
    TypeExpr,
)

SHIPS_RS = """\
fn move_ships(mut query: Query<(&Transform, &mut Velocity), With<Player>>) {
    for (transform, mut velocity) in query.iter_mut() {}
}

fn spawn_ships(mut commands: Commands, assets: Res<AssetServer>) {
    commands.spawn(());
}
"""

COMBAT_RS = """\
use bevy::prelude::*;

pub fn fire(
    mut hits: EventWriter<Hit>,
    config: Res<Config>,
    shooters: Query<&Transform, (With<Player>, Without<Dead>)>,
) {
}

pub fn take_damage(mut hits: EventReader<'_, '_, Hit>, mut health: Query<&mut Health>) {}

mod ai {
    fn think(mut brains: Query<&mut Brain, Without<Player>>, mut rng: ResMut<Rng>) {}
}
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def bevy_project(temp_dir: Path) -> Path:
    """Create a small Rust project with systems under src/."""
    root = temp_dir / "game"
    src = root / "src"
    (src / "combat").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "game"\n')
    (src / "ships.rs").write_text(SHIPS_RS)
    (src / "combat" / "mod.rs").write_text(COMBAT_RS)
    (src / "README.md").write_text("fn not_rust(q: Query<&Ignored>) {}\n")
    return root


def make_decl(
    name: str,
    *types: TypeExpr,
    generics: frozenset[str] = frozenset(),
    path: Path = Path("src/systems.rs"),
) -> FunctionDecl:
    """Build a declaration by hand, without going through the parser."""
    text = f"fn {name}() {{}}"
    source = SourceText(path=path, content=text.encode())
    return FunctionDecl(
        name=name,
        span=SourceSpan(source, 0, len(text), 1, 1),
        params=tuple(Param(f"p{i}", t) for i, t in enumerate(types)),
        generics=generics,
    )


@pytest.fixture
def decl_factory() -> Callable[..., FunctionDecl]:
    return make_decl
