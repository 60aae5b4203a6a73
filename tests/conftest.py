# tests/conftest.py
import os

# Settings are read at import time, so configure them before importing the app
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from snyklynk.main import app
from snyklynk.core.dependencies import get_user_supabase
from snyklynk.database.supabase_client import (
    get_supabase, get_service_supabase, get_session_supabase
)
from snyklynk.modules.auth.service import clear_auth_cache
from snyklynk.modules.registration.routes import get_registration_service
from snyklynk.modules.registration.service import RegistrationService


class FakeAPIError(Exception):
    """Shaped like postgrest's APIError: message and code attributes"""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.descending = False
        self.single_mode = None

    def select(self, columns="*"):
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by, self.descending = column, desc
        return self

    def limit(self, count):
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    def _matching(self, rows):
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append(("table", self.table, self.op))
        error = self.db.table_errors.get((self.table, self.op))
        if error is not None:
            raise error
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in payload:
                row = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
                row.update(item)
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        matching = self._matching(rows)
        if self.op == "update":
            for row in matching:
                row.update(self.payload)
            return FakeResponse([copy.deepcopy(r) for r in matching])
        if self.op == "delete":
            for row in matching:
                rows.remove(row)
            return FakeResponse([copy.deepcopy(r) for r in matching])

        result = [copy.deepcopy(r) for r in matching]
        if self.order_by:
            column = self.order_by
            result.sort(
                key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else ""),
                reverse=self.descending
            )
        if self.single_mode:
            return FakeResponse(result[0] if result else None)
        return FakeResponse(result)


class FakeRpc:
    def __init__(self, db, name, params):
        self.db, self.name, self.params = db, name, params

    def execute(self):
        self.db.calls.append(("rpc", self.name, None))
        self.db.rpc_calls.append((self.name, self.params))
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            return FakeResponse(None)
        return FakeResponse(handler(self.params))


class FakeBucket:
    def __init__(self, db, name):
        self.db, self.name = db, name

    def upload(self, path, content, file_options=None):
        self.db.calls.append(("storage", self.name, "upload"))
        errors = self.db.upload_errors.get(self.name) or []
        if errors:
            raise errors.pop(0)
        self.db.objects.setdefault(self.name, {})[path] = content
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.db.calls.append(("storage", self.name, "remove"))
        self.db.removed.setdefault(self.name, []).extend(paths)
        for path in paths:
            self.db.objects.get(self.name, {}).pop(path, None)
        return []


class FakeStorage:
    def __init__(self, db):
        self.db = db

    def from_(self, bucket):
        return FakeBucket(self.db, bucket)


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth
        self.error = None

    def update_user_by_id(self, user_id, attributes):
        self.auth.calls.append(("update_user_by_id", user_id, attributes))
        if self.error:
            raise self.error
        return SimpleNamespace(user=self.auth.users_by_id.get(user_id))

    def delete_user(self, user_id):
        self.auth.calls.append(("delete_user", user_id, None))
        if self.error:
            raise self.error

    def sign_out(self, jwt, scope="global"):
        self.auth.calls.append(("admin_sign_out", jwt, scope))


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.users_by_id = {}
        self.passwords = {}
        self.tokens = {}
        self.calls = []
        self.require_confirmation = False
        self.admin = FakeAuthAdmin(self)

    def add_user(self, email, password="secret123", is_admin=False, confirmed=True):
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            app_metadata={"is_admin": True} if is_admin else {},
            user_metadata={},
            confirmed=confirmed,
            created_at=datetime.now(timezone.utc).isoformat(),
            updated_at=None,
        )
        self.users[email] = user
        self.users_by_id[user.id] = user
        self.passwords[email] = password
        return user

    def issue_token(self, user):
        token = f"token-{user.id}"
        self.tokens[token] = user
        return token

    def _session(self, user):
        return SimpleNamespace(access_token=self.issue_token(user), refresh_token=f"refresh-{user.id}")

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials["email"], None))
        if credentials["email"] in self.users:
            raise Exception("User already registered")
        user = self.add_user(
            credentials["email"], credentials["password"], confirmed=not self.require_confirmation
        )
        session = None if self.require_confirmation else self._session(user)
        return SimpleNamespace(user=user, session=session)

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in_with_password", credentials["email"], None))
        email = credentials["email"]
        if email not in self.users or self.passwords[email] != credentials["password"]:
            raise Exception("Invalid login credentials")
        user = self.users[email]
        if not user.confirmed:
            raise Exception("Email not confirmed")
        return SimpleNamespace(user=user, session=self._session(user))

    def get_user(self, jwt=None):
        self.calls.append(("get_user", jwt, None))
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def resend(self, params):
        self.calls.append(("resend", params["email"], params["type"]))

    def sign_out(self):
        self.calls.append(("sign_out", None, None))


class FakeSupabase:
    """In-memory stand-in for the Supabase client: tables, RPCs, storage and auth"""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.rpc_calls = []
        self.rpc_handlers = {}
        self.table_errors = {}
        self.upload_errors = {}
        self.objects = {}
        self.removed = {}
        self.auth = FakeAuth()
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name, params or {})

    def add_row(self, table, **row):
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.tables.setdefault(table, []).append(row)
        return row


def make_escort(fake, user_id=None, **overrides):
    row = {
        "user_id": user_id or str(uuid.uuid4()),
        "first_name": "Thandi",
        "last_name": "Mokoena",
        "email": "thandi@example.com",
        "phone": "0821234567",
        "date_of_birth": "1995-04-12",
        "gender": "Female",
        "location": "Cape Town",
        "languages": ["English", "Xhosa"],
        "services": ["Dinner Companionship"],
        "verified": False,
        "banned": False,
    }
    row.update(overrides)
    return fake.add_row("escort_profiles", **row)


def make_taxi(fake, user_id=None, **overrides):
    row = {
        "user_id": user_id or str(uuid.uuid4()),
        "first_name": "Sipho",
        "last_name": "Dlamini",
        "email": "sipho@example.com",
        "phone": "0719876543",
        "business_name": "Sipho Shuttles",
        "license_number": "DL-778812",
        "vehicle_make": "Toyota",
        "vehicle_model": "Quantum",
        "vehicle_year": 2019,
        "vehicle_color": "White",
        "vehicle_registration": "CA 123-456",
        "service_areas": ["Durban", "Umhlanga"],
        "verified": False,
        "banned": False,
    }
    row.update(overrides)
    return fake.add_row("taxi_owner_profiles", **row)


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture(scope="function")
def sleeps() -> list:
    """Delays requested by the registration retry loop, recorded instead of slept"""
    return []


@pytest.fixture(scope="function")
def client(fake_supabase, sleeps) -> TestClient:
    """
    TestClient whose every Supabase handle is the in-memory fake.
    """
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_session_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_user_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_registration_service] = lambda: RegistrationService(
        fake_supabase, sleep=sleeps.append
    )
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def admin_token(fake_supabase) -> str:
    admin = fake_supabase.auth.add_user("admin@snyklynk.co.za", "adminpass", is_admin=True)
    return fake_supabase.auth.issue_token(admin)


@pytest.fixture
def escort_user(fake_supabase):
    """An escort with an account, a profile and a token"""
    user = fake_supabase.auth.add_user("thandi@example.com")
    profile = make_escort(fake_supabase, user_id=user.id)
    token = fake_supabase.auth.issue_token(user)
    return SimpleNamespace(user=user, profile=profile, token=token, headers=auth_headers(token))
