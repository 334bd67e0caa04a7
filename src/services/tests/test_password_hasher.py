"""Unit tests for PasswordHasher."""

import unittest

from services.password_hasher import PasswordHasher


class TestPasswordHasher(unittest.TestCase):

    def setUp(self):
        # Minimum bcrypt cost keeps the suite fast
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_then_verify_succeeds(self):
        for password in ["secret1", "correct horse battery staple", "pässwörd✓"]:
            hashed = self.hasher.hash(password)
            self.assertNotEqual(hashed, password)
            self.assertTrue(self.hasher.verify(password, hashed))

    def test_hash_embeds_cost_and_salt(self):
        first = self.hasher.hash("secret1")
        second = self.hasher.hash("secret1")
        self.assertTrue(first.startswith("$2b$04$"))
        self.assertNotEqual(first, second)

    def test_different_password_does_not_verify(self):
        hashed = self.hasher.hash("secret1")
        for other in ["secret2", "Secret1", "secret1 ", ""]:
            self.assertFalse(self.hasher.verify(other, hashed))

    def test_malformed_hash_returns_false(self):
        self.assertFalse(self.hasher.verify("secret1", "not-a-bcrypt-hash"))

    def test_missing_hash_returns_false(self):
        self.assertFalse(self.hasher.verify("secret1", None))
        self.assertFalse(self.hasher.verify("secret1", ""))

    def test_rounds_are_configurable(self):
        hashed = PasswordHasher(rounds=5).hash("secret1")
        self.assertTrue(hashed.startswith("$2b$05$"))


if __name__ == '__main__':
    unittest.main()
