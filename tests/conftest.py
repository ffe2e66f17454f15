import os
import sys
from decimal import Decimal
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')

from models import db, Account, Vendor, CatalogEntry
from app.auth.identity import Elevated, Scoped, ADMIN, MANAGER, MEMBER


@pytest.fixture(scope='session')
def app_instance():
    # one app per session: prometheus metrics register globally
    from app import create_app
    from app.config import TestingConfig
    app = create_app(TestingConfig)
    return app


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture
def admin():
    return Elevated("1")


@pytest.fixture
def india_manager():
    return Scoped("2", MANAGER, "India")


@pytest.fixture
def india_member():
    return Scoped("3", MEMBER, "India")


@pytest.fixture
def america_manager():
    return Scoped("4", MANAGER, "America")


def make_account(username, role, region=None, password="secret123"):
    account = Account(username=username, role=role, region=None if role == ADMIN else region)
    account.set_password(password)
    db.session.add(account)
    db.session.commit()
    return account


def make_vendor(name="Spice Hut", region="India", address="12 MG Road"):
    vendor = Vendor(name=name, address=address, region=region)
    db.session.add(vendor)
    db.session.commit()
    return vendor


def make_entry(vendor, name="Masala Dosa", price="4.50"):
    entry = CatalogEntry(
        vendor_id=vendor.id,
        name=name,
        description="",
        price=Decimal(price),
        region=vendor.region,
    )
    db.session.add(entry)
    db.session.commit()
    return entry


def auth_header(account):
    from app.utils import create_access_token
    token = create_access_token(account.id, account.role, account.region)
    return {"Authorization": f"Bearer {token}"}
