"""Shared fixtures for PokeBattle tests."""

import random

import pytest
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool
from typer.testing import CliRunner

from pokebattle.data.store import MemorySessionStore, SqlSessionStore
from pokebattle.service import BattleService
from pokebattle.utils.config import Config


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def seed_source():
    """Deterministic stream of 64-bit seeds."""
    rng = random.Random(1234)
    return lambda: rng.getrandbits(64)


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(data_dir=tmp_path / "data", decision_timeout_seconds=5.0)


@pytest.fixture
def memory_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def sql_store(config) -> SqlSessionStore:
    """SQL store on a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return SqlSessionStore(config, engine=engine)


@pytest.fixture
def service(memory_store, config, seed_source) -> BattleService:
    return BattleService(memory_store, config=config, seed_source=seed_source)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI runner for command tests."""
    return CliRunner()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point Config.from_env() at a temporary data directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("POKEBATTLE_DATA_DIR", str(data_dir))
    monkeypatch.delenv("POKEBATTLE_DATABASE_URL", raising=False)
    monkeypatch.setenv("COLUMNS", "200")
    return data_dir
