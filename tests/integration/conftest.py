import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.depends import (
    get_password_hasher,
    get_reset_code_sender,
    get_unit_of_work,
    get_verification_code_sender,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.reset_code_sender import IResetCodeSender
from src.app.services.verification_code_sender import IVerificationCodeSender
from src.domain.entities import Admin


class CapturingResetCodeSender(IResetCodeSender):
    """Keeps issued reset codes so tests can confirm them"""

    def __init__(self):
        self.codes = {}

    async def send(self, email: str, code: str) -> None:
        self.codes[email] = code


class CapturingVerificationCodeSender(IVerificationCodeSender):
    """Keeps issued signup codes so tests can verify them"""

    def __init__(self):
        self.codes = {}

    async def send(self, email: str, name: str, code: str) -> None:
        self.codes[email] = code


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def reset_code_sender():
    return CapturingResetCodeSender()


@pytest.fixture
def verification_code_sender():
    return CapturingVerificationCodeSender()


@pytest_asyncio.fixture
async def client(db_session, reset_code_sender, verification_code_sender):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig
    from src.api.utils.rate_limit import reset_rate_limits

    reset_rate_limits()

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_reset_code_sender] = lambda: reset_code_sender
    app.dependency_overrides[get_verification_code_sender] = lambda: verification_code_sender

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def signed_up_student(client, test_data):
    """Signs up the default student and returns the signup response body"""
    response = await client.post("/auth/signup", json=test_data.get_copy("student_signup"))
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def admin_account(db_session, test_data):
    credentials = test_data.get_copy("admin")
    admin = Admin(
        email=credentials["email"],
        password_hash=get_password_hasher().hash(credentials["password"]),
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin
