"""
Integration tests for the Alembic migrations.

Runs the migration chain against a temporary SQLite file and checks that the
resulting schema matches the models.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect


BACKEND_DIR = Path(__file__).resolve().parents[2]


@pytest.fixture
def alembic_config(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config, database_url


class TestMigrations:

    def test_upgrade_creates_all_tables(self, alembic_config):
        config, database_url = alembic_config

        command.upgrade(config, "head")

        engine = create_engine(database_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert {"departments", "doctors", "weekly_schedules", "doctor_leaves", "bookings"} <= tables

    def test_downgrade_removes_tables(self, alembic_config):
        config, database_url = alembic_config

        command.upgrade(config, "head")
        command.downgrade(config, "base")

        engine = create_engine(database_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert "weekly_schedules" not in tables
        assert "bookings" not in tables
