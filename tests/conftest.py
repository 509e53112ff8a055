import pytest

from src.freight_matching.services.matching.engine import MatchingConfig
from tests.fakes import FakeSupabase


@pytest.fixture
def fake_db() -> FakeSupabase:
    db = FakeSupabase()
    db.tables["profiles"] = [
        {"id": "profile-1", "user_id": "user-1", "role": "MOTORISTA", "active_mode": None},
        {"id": "profile-2", "user_id": "user-2", "role": "PRODUTOR", "active_mode": None},
        {"id": "profile-3", "user_id": "user-3", "role": "PRODUTOR", "active_mode": "TRANSPORTADORA"},
    ]
    db.auth.tokens = {"driver-token": "user-1", "producer-token": "user-2", "carrier-token": "user-3"}
    return db


@pytest.fixture
def config() -> MatchingConfig:
    return MatchingConfig()
