from pathlib import Path

from alembic import command
from alembic.config import Config
import sqlalchemy as sa

from shalomhomes.config import Base
from shalomhomes.storage import DbStorage

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(db_url: str) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "shalomhomes" / "migrations"))
    config.set_main_option("sqlalchemy.url", db_url)
    return config


def test_initial_migration_matches_models(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'migrations.db'}"
    command.upgrade(_alembic_config(db_url), "head")

    engine = sa.create_engine(db_url)
    try:
        inspector = sa.inspect(engine)
        for table in Base.metadata.sorted_tables:
            migrated = {column["name"] for column in inspector.get_columns(table.name)}
            assert migrated == set(table.columns.keys()), table.name
    finally:
        engine.dispose()

    storage = DbStorage.from_url(db_url)
    try:
        user = storage.create_user(
            {"username": "admin", "email": "admin@example.com", "name": "Admin", "password": "admin123", "role": "owner"}
        )
        assert storage.get_user_by_username("admin").id == user.id
    finally:
        storage.dispose()


def test_downgrade_removes_tables(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'downgrade.db'}"
    config = _alembic_config(db_url)
    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = sa.create_engine(db_url)
    try:
        assert set(sa.inspect(engine).get_table_names()) == {"alembic_version"}
    finally:
        engine.dispose()
