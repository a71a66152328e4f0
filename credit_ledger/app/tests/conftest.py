from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from ..core.config import get_settings
from ..core.db import create_engine_for_url, get_engine, get_session, init_db, set_engine
from ..core.dependencies import get_mailer
from ..core.errors import NotificationError
from ..core.money import from_cents, to_cents
from ..main import app
from ..models import AccountModel
from ..notifications import EmailMessageContent


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: list[EmailMessageContent] = []

    def send(self, message: EmailMessageContent) -> None:
        self.sent.append(message)


class FailingMailer:
    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for
        self.attempts: list[str] = []

    def send(self, message: EmailMessageContent) -> None:
        self.attempts.append(message.to)
        if self.fail_for is None or message.to in self.fail_for:
            raise NotificationError(f"SMTP relay refused {message.to}")


@pytest.fixture
def engine(tmp_path):
    test_engine = create_engine_for_url(f"sqlite:///{tmp_path / 'test.db'}")
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def make_account(engine):
    def _make_account(email: str, balance: str = "0", merchant_code: str | None = None, name: str | None = None) -> int:
        with Session(engine) as db_session:
            account = AccountModel(
                email=email,
                display_name=name or email.split("@")[0].title(),
                merchant_code=merchant_code,
                balance_cents=to_cents(Decimal(balance)),
            )
            db_session.add(account)
            db_session.commit()
            db_session.refresh(account)
            return account.id

    return _make_account


@pytest.fixture
def balance_of(engine):
    def _balance_of(account_id: int) -> Decimal:
        with Session(engine) as db_session:
            return from_cents(db_session.get(AccountModel, account_id).balance_cents)

    return _balance_of


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def client(engine, mailer) -> TestClient:
    original_engine = get_engine()
    set_engine(engine)

    def _get_session_override():
        with Session(engine) as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _get_session_override
    app.dependency_overrides[get_mailer] = lambda: mailer
    init_db()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    set_engine(original_engine)
