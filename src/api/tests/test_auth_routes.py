"""Route tests for register, verify, login, logout and password reset."""

import os
import unittest
import sys
from pathlib import Path
from urllib.parse import parse_qs, urlparse

sys.path.insert(0, str(Path(__file__).parent.parent.parent))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from fastapi.testclient import TestClient

from api.dependencies import get_mailer, get_settings, get_user_repo
from api.main import app
from api.security import SESSION_COOKIE_NAME
from adapter.fake.mailer import FakeMailer
from adapter.fake.user_repository import FakeUserRepository
from utils.settings import Settings

FRONTEND_URL = "http://localhost:5173"


class StaleLookupRepository(FakeUserRepository):
    """Email lookups miss, as when another request claims the address concurrently."""

    def get_by_email(self, email):
        return None


class AuthRoutesTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.mailer = FakeMailer()
        self.settings = Settings(
            jwt_secret_key="test-secret",
            bcrypt_rounds=4,
            frontend_url=FRONTEND_URL,
        )
        app.dependency_overrides[get_settings] = lambda: self.settings
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        app.dependency_overrides[get_mailer] = lambda: self.mailer
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _register(self, email="ann@example.com", password="secret1", full_name="Ann"):
        return self.client.post("/api/users/register", json={
            "email": email, "password": password, "fullName": full_name,
        })

    def _verify(self, email="ann@example.com"):
        otp = self.mailer.last('otp').payload
        return self.client.post("/api/users/verify", json={"email": email, "otp": otp})

    def _login(self, email="ann@example.com", password="secret1"):
        return self.client.post("/api/users/login", json={"email": email, "password": password})

    def _reset_token(self) -> str:
        url = self.mailer.last('reset').payload
        return parse_qs(urlparse(url).query)["token"][0]


class TestRegisterAndVerify(AuthRoutesTestCase):

    def test_register_returns_summary(self):
        response = self._register()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "User registered successfully.")
        self.assertEqual(body["data"]["email"], "ann@example.com")
        self.assertEqual(body["data"]["fullName"], "Ann")
        self.assertIn("id", body["data"])
        self.assertNotIn("otp", body["data"])
        self.assertNotIn("password", str(body["data"]).lower())

    def test_register_sends_otp(self):
        self._register()

        mail = self.mailer.last('otp')
        self.assertEqual(mail.to, "ann@example.com")
        self.assertEqual(len(mail.payload), 6)

    def test_duplicate_register_is_conflict(self):
        self._register()

        response = self._register(full_name="Other")

        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "User with this email already exists.")

    def test_register_race_on_email_is_conflict(self):
        self.repo = StaleLookupRepository()
        self.repo.create("ann@example.com", "hash", "Ann")

        response = self._register(full_name="Other")

        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertEqual(body["message"], "User with this email already exists.")
        self.assertEqual(body["error"]["code"], "conflict")
        self.assertEqual(len(self.repo.store), 1)

    def test_missing_fields_are_rejected(self):
        response = self.client.post("/api/users/register", json={"email": "ann@example.com"})

        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "Please provide all required fields.")
        self.assertEqual(body["error"]["code"], "validation_error")

    def test_invalid_email_and_short_password_are_rejected(self):
        for payload in [
            {"email": "not-an-email", "password": "secret1", "fullName": "Ann"},
            {"email": "ann@example.com", "password": "12345", "fullName": "Ann"},
        ]:
            with self.subTest(payload=payload):
                response = self.client.post("/api/users/register", json=payload)
                self.assertEqual(response.status_code, 422)
        self.assertEqual(self.repo.store, {})

    def test_verify_with_wrong_code(self):
        self._register()

        response = self.client.post("/api/users/verify", json={
            "email": "ann@example.com", "otp": "000000",
        })

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid email or OTP")

    def test_verify_twice_fails_second_time(self):
        self._register()

        first = self._verify()
        second = self._verify()

        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["message"], "User verified successfully.")
        self.assertEqual(second.status_code, 400)


class TestLoginAndLogout(AuthRoutesTestCase):

    def test_full_signup_flow_reaches_me(self):
        self._register()
        self.assertEqual(self._verify().status_code, 200)

        login = self._login()
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.json()["message"], "User logged in successfully.")
        self.assertIn(SESSION_COOKIE_NAME, login.cookies)

        me = self.client.get("/api/users/me")
        self.assertEqual(me.status_code, 200)
        user = me.json()["data"]["user"]
        self.assertEqual(user["email"], "ann@example.com")
        self.assertTrue(user["isVerified"])
        self.assertEqual(user["role"], "USER")

    def test_session_cookie_attributes(self):
        self._register()
        self._verify()

        cookie = self._login().headers["set-cookie"].lower()

        self.assertIn("httponly", cookie)
        self.assertIn("samesite=lax", cookie)
        self.assertIn("path=/", cookie)
        self.assertNotIn("secure", cookie)

    def test_cookie_is_secure_outside_development(self):
        self.settings = Settings(jwt_secret_key="test-secret", bcrypt_rounds=4, environment="production")
        self._register()
        self._verify()

        self.assertIn("secure", self._login().headers["set-cookie"].lower())

    def test_login_before_verification_is_forbidden(self):
        self._register()

        response = self._login()

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Please verify your email address.")
        self.assertNotIn(SESSION_COOKIE_NAME, response.cookies)

    def test_login_failures(self):
        self._register()
        self._verify()

        unknown = self._login(email="nobody@example.com")
        wrong = self._login(password="wrong-pass")

        self.assertEqual(unknown.status_code, 404)
        self.assertEqual(unknown.json()["message"], "User not found.")
        self.assertEqual(wrong.status_code, 400)
        self.assertEqual(wrong.json()["message"], "Invalid password.")

    def test_me_without_session_is_unauthorized(self):
        response = self.client.get("/api/users/me")

        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.json()["success"])
        self.assertEqual(response.json()["message"], "No token provided")

    def test_me_with_garbage_token_is_unauthorized(self):
        self.client.cookies.set(SESSION_COOKIE_NAME, "garbage")

        response = self.client.get("/api/users/me")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid or expired token")

    def test_bearer_header_is_accepted(self):
        self._register()
        self._verify()
        token = self._login().cookies[SESSION_COOKIE_NAME]
        self.client.cookies.clear()

        response = self.client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 200)

    def test_logout_clears_cookie(self):
        self._register()
        self._verify()
        self._login()

        response = self.client.post("/api/users/logout")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "User logged out successfully.")
        self.assertIn(f"{SESSION_COOKIE_NAME}=", response.headers["set-cookie"])
        self.assertEqual(self.client.get("/api/users/me").status_code, 401)

    def test_logout_twice_with_same_token(self):
        self._register()
        self._verify()
        token = self._login().cookies[SESSION_COOKIE_NAME]
        self.client.cookies.clear()
        headers = {"Authorization": f"Bearer {token}"}

        first = self.client.post("/api/users/logout", headers=headers)
        second = self.client.post("/api/users/logout", headers=headers)

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)

    def test_logout_without_session_is_unauthorized(self):
        self.assertEqual(self.client.post("/api/users/logout").status_code, 401)


class TestPasswordReset(AuthRoutesTestCase):

    def setUp(self):
        super().setUp()
        self._register()
        self._verify()

    def test_forgot_password_mails_link(self):
        response = self.client.post("/api/users/forgot-password", json={"email": "ann@example.com"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Password reset link sent to email.")
        self.assertTrue(self.mailer.last('reset').payload.startswith(f"{FRONTEND_URL}/reset-password?token="))

    def test_forgot_password_unknown_email(self):
        response = self.client.post("/api/users/forgot-password", json={"email": "nobody@example.com"})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.mailer.last('reset'), None)

    def test_reset_then_login_with_new_password(self):
        self.client.post("/api/users/forgot-password", json={"email": "ann@example.com"})

        response = self.client.post("/api/users/set-new-password", json={
            "token": self._reset_token(), "newPassword": "brandnew1",
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Password reset successful")
        self.assertEqual(self._login(password="secret1").status_code, 400)
        self.assertEqual(self._login(password="brandnew1").status_code, 200)

    def test_reset_token_is_single_use(self):
        self.client.post("/api/users/forgot-password", json={"email": "ann@example.com"})
        token = self._reset_token()
        self.client.post("/api/users/set-new-password", json={"token": token, "newPassword": "brandnew1"})

        response = self.client.post("/api/users/set-new-password", json={
            "token": token, "newPassword": "another1",
        })

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid token")

    def test_only_latest_reset_link_works(self):
        self.client.post("/api/users/forgot-password", json={"email": "ann@example.com"})
        first = self._reset_token()
        self.client.post("/api/users/forgot-password", json={"email": "ann@example.com"})
        second = self._reset_token()

        stale = self.client.post("/api/users/set-new-password", json={"token": first, "newPassword": "brandnew1"})
        fresh = self.client.post("/api/users/set-new-password", json={"token": second, "newPassword": "brandnew1"})

        self.assertEqual(stale.status_code, 400)
        self.assertEqual(fresh.status_code, 200)

    def test_garbage_token_is_rejected(self):
        response = self.client.post("/api/users/set-new-password", json={
            "token": "garbage", "newPassword": "brandnew1",
        })

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid or expired token")

    def test_short_new_password_is_rejected(self):
        self.client.post("/api/users/forgot-password", json={"email": "ann@example.com"})

        response = self.client.post("/api/users/set-new-password", json={
            "token": self._reset_token(), "newPassword": "123",
        })

        self.assertEqual(response.status_code, 422)


if __name__ == '__main__':
    unittest.main()
