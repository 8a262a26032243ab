import os

# Settings are read at import time; point them at throwaway values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
os.environ["RESEND_API_KEY"] = ""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from motorpicks.core.errors import NotificationError
from motorpicks.db.base import Base
from motorpicks.db.session import get_db
from motorpicks.main import app
from motorpicks.models.picks import ClerkUser, OfficialResult, Pick, Wallet
from motorpicks.services import notifications

INTERNAL_KEY = "test-internal-key"


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, html):
        if self.fail:
            raise NotificationError("provider down")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"fake-{len(self.sent)}"}


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    # pysqlite needs explicit BEGIN for SAVEPOINTs to behave
    @event.listens_for(eng, "connect")
    def _no_autobegin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(db, mailer):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[notifications.get_mailer] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# -----------------------
# Row factories
# -----------------------
@pytest.fixture
def make_pick(db):
    def _make(selections, mode="Full Throttle", wager=10_000, multiplier=6,
              user_id="user_1", gp_name="GP de Mónaco"):
        pick = Pick(
            user_id=user_id,
            gp_name=gp_name,
            session_type="race",
            picks=selections,
            mode=mode,
            multiplier=multiplier,
            wager_amount=Decimal(wager),
            potential_win=Decimal(wager) * multiplier,
        )
        db.add(pick)
        db.commit()
        return pick
    return _make


@pytest.fixture
def add_results(db):
    def _add(gp_name, positions):
        """positions: {driver: (qualy_position, race_position)}"""
        for driver, (qualy, race) in positions.items():
            db.add(OfficialResult(gp_name=gp_name, driver=driver, qualy_position=qualy, race_position=race))
        db.commit()
    return _add


@pytest.fixture
def add_user(db):
    def _add(clerk_id="user_1", email="fan@example.com", full_name="Juan Pérez", balance=0, withdrawable=0):
        db.add(ClerkUser(clerk_id=clerk_id, email=email, full_name=full_name))
        db.add(Wallet(user_id=clerk_id, balance_cop=Decimal(balance), withdrawable_cop=Decimal(withdrawable),
                      mmc_coins=0, fuel_coins=0))
        db.commit()
    return _add
