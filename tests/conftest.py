"""
Shared fixtures: an isolated SQLite database and git root per test.
"""

import pytest
import pytest_asyncio

from paas.db.config import Settings
from paas.db.session import create_engine, create_session_factory, init_schema, session_scope
from paas.schemas.apps import Team, User
from paas.services.apps import AppService
from paas.services.provisioning import RepositoryProvisioner

GIT_HOST = "tsuru.plataformas.glb.com"


@pytest_asyncio.fixture
async def engine(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'paas_test.db'}")
    engine = create_engine(settings)
    await init_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    factory = create_session_factory(engine)
    async with session_scope(factory) as session:
        yield session


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def provisioner(home):
    return RepositoryProvisioner(home=str(home), git_host=GIT_HOST)


@pytest.fixture
def service(session, provisioner):
    return AppService(session, provisioner)


@pytest.fixture
def team():
    return Team(name="tsuruteam")


@pytest.fixture
def who():
    """Three overlapping teams and their users."""
    one = User(email="imone@thewho.com", password="123")
    punk = User(email="punk@thewho.com", password="123")
    cut = User(email="cutmyhair@thewho.com", password="123")
    return {
        "users": {"one": one, "punk": punk, "cut": cut},
        "teams": [
            Team(name="TheWho", users=[one, punk, cut]),
            Team(name="TheWhat", users=[one, punk]),
            Team(name="TheWhere", users=[one]),
        ],
    }
