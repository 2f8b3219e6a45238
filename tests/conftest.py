"""Shared fixtures: throwaway SQLite stores, small capacity policies, tariff helpers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lotmanager.config import settings
from lotmanager.database import create_tables
from lotmanager.models.tariff import Tariff
from lotmanager.services.capacity_policy import CapacityGroup, CapacityPolicy
from lotmanager.services.seeding import seed_categories, seed_spaces

NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _no_retry_delay(monkeypatch):
    monkeypatch.setattr(settings, "RELEASE_RETRY_DELAY_SECONDS", 0.0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """Real separate connections, for interleaving two sessions."""
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'lot.db'}")
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def threaded_engine(tmp_path):
    """File store shared by worker threads, each with its own session."""
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def db(engine):
    session = make_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def policy():
    return CapacityPolicy(groups={
        "car": CapacityGroup(name="car", capacity=3, category_ids=[1, 2], code_prefix="A"),
        "motorcycle": CapacityGroup(name="motorcycle", capacity=1, category_ids=[3], code_prefix="M"),
    })


@pytest.fixture
def seeded_db(db, policy):
    seed_categories(db, policy)
    seed_spaces(db, policy)
    return db


def add_tariff(db, category_id=1, billing_mode="PER_HOUR", rate="1000", active=True,
               fraction_minutes=None, created_at=None, name=None):
    tariff = Tariff(
        category_id=category_id,
        name=name or f"{billing_mode} {rate}",
        billing_mode=billing_mode,
        fraction_minutes=fraction_minutes,
        rate=Decimal(str(rate)),
        active=active,
        valid_from=NOW - timedelta(days=30),
        created_at=created_at or NOW - timedelta(days=1),
    )
    db.add(tariff)
    db.commit()
    return tariff
