"""Shared TestCase for API tests: in-memory SQLite per test and a TestClient."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from botanical.core.config import Settings, get_settings
from botanical.core.database import get_db
from botanical.main import app
from botanical.models import ADMIN_ROLE, Base, User

TEST_SECRET = "api-test-signing-secret-0123456789abcdef"


class ApiTestCase(unittest.TestCase):
    """Each test gets an empty database; settings can be replaced via self.use_settings."""

    def setUp(self) -> None:
        # StaticPool keeps one connection so the in-memory DB is shared with the threadpool.
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.use_settings()
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    def use_settings(self, **overrides: object) -> Settings:
        values = {"JWT_SECRET": TEST_SECRET, "BCRYPT_ROUNDS": 4, "DATABASE_URL": "sqlite://"}
        values.update(overrides)
        self.settings = Settings(**values)
        app.dependency_overrides[get_settings] = lambda: self.settings
        return self.settings

    def register(
        self, phone: str = "13800000001", password: str = "abc123", username: str = "tester"
    ):
        return self.client.post(
            "/api/v1/auth/register",
            json={"username": username, "phone": phone, "password": password},
        )

    def login(self, phone: str = "13800000001", password: str = "abc123"):
        return self.client.post("/api/v1/auth/login", json={"phone": phone, "password": password})

    def token_for(self, phone: str = "13800000001", password: str = "abc123") -> str:
        resp = self.login(phone, password)
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def fetch_user(self, phone: str) -> User | None:
        db = self.SessionTesting()
        try:
            return db.query(User).filter(User.phone == phone).first()
        finally:
            db.close()

    def promote_to_admin(self, phone: str) -> None:
        db = self.SessionTesting()
        try:
            db.query(User).filter(User.phone == phone).update({User.user_role: ADMIN_ROLE})
            db.commit()
        finally:
            db.close()

    def count_users(self) -> int:
        db = self.SessionTesting()
        try:
            return db.query(User).count()
        finally:
            db.close()
