# backend/tests/test_migrations.py

"""
The migration history must build the same tables the models declare.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from core.database import Base

BACKEND_DIR = Path(__file__).resolve().parent.parent


def alembic_config(database_url: str) -> Config:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def test_upgrade_and_downgrade(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = alembic_config(database_url)
    engine = create_engine(database_url)

    command.upgrade(config, "head")

    tables = set(inspect(engine).get_table_names()) - {"alembic_version"}
    assert tables == set(Base.metadata.tables)
    columns = {c["name"] for c in inspect(engine).get_columns("notifications")}
    assert columns == set(Base.metadata.tables["notifications"].columns.keys())

    command.downgrade(config, "base")

    assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    engine.dispose()
