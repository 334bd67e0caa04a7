"""Unit tests for OTP generation and email verification."""

import unittest

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import InvalidCredentialsError
from services.verification_service import generate_otp, verify_email


class TestGenerateOtp(unittest.TestCase):

    def test_otp_is_six_digits(self):
        for _ in range(200):
            otp = generate_otp()
            self.assertEqual(len(otp), 6)
            self.assertTrue(otp.isdigit())
            self.assertNotEqual(otp[0], "0")

    def test_otp_varies(self):
        codes = {generate_otp() for _ in range(50)}
        self.assertGreater(len(codes), 1)


class TestVerifyEmail(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = self.repo.create("a@x.com", "hash", "Ann", otp="123456")

    def test_matching_code_verifies_and_consumes(self):
        updated = verify_email(self.repo, "a@x.com", "123456")

        self.assertTrue(updated.is_verified)
        self.assertIsNone(updated.otp)
        self.assertTrue(self.repo.get_by_id(self.user.id).is_verified)

    def test_wrong_code_raises_and_leaves_user_untouched(self):
        with self.assertRaises(InvalidCredentialsError) as ctx:
            verify_email(self.repo, "a@x.com", "654321")

        self.assertEqual(str(ctx.exception), "Invalid email or OTP")
        stored = self.repo.get_by_id(self.user.id)
        self.assertFalse(stored.is_verified)
        self.assertEqual(stored.otp, "123456")

    def test_wrong_email_raises(self):
        with self.assertRaises(InvalidCredentialsError):
            verify_email(self.repo, "b@x.com", "123456")

    def test_code_cannot_be_reused(self):
        verify_email(self.repo, "a@x.com", "123456")

        with self.assertRaises(InvalidCredentialsError):
            verify_email(self.repo, "a@x.com", "123456")

    def test_code_of_another_account_is_rejected(self):
        self.repo.create("b@x.com", "hash", "Bob", otp="999999")

        with self.assertRaises(InvalidCredentialsError):
            verify_email(self.repo, "a@x.com", "999999")


if __name__ == '__main__':
    unittest.main()
