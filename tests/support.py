"""Shared fixtures for the test suite"""

import unittest
from typing import Any

from jose import jwt

from rendezvous import config
from rendezvous.database import Base, SessionLocal, engine
from rendezvous.models import Party


def token_for(party_id: str, **claims) -> str:
    return jwt.encode(
        {"user_id": party_id, **claims},
        config.ACCESS_TOKEN_SECRET,
        algorithm=config.ACCESS_TOKEN_ALGORITHM,
    )


def auth_headers(party: Party) -> dict:
    return {"Authorization": f"Bearer {token_for(party.id)}"}


class FakeChannel:
    """Records pushes instead of sending them"""

    def __init__(self):
        self.events: list[tuple[str, Any]] = []

    def push(self, event: str, data: Any) -> None:
        self.events.append((event, data))


class BrokenChannel:
    def push(self, event: str, data: Any) -> None:
        raise ConnectionResetError("socket closed")


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test on the in-memory SQLite engine"""

    def setUp(self):
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()

    def tearDown(self):
        self.db.close()

    def make_party(self, name: str, **fields) -> Party:
        party = Party(name=name, avatar=f"https://cdn.example.com/{name.lower()}.png", **fields)
        self.db.add(party)
        self.db.commit()
        self.db.refresh(party)
        return party
