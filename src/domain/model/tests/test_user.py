"""Tests for user and session domain models."""

import unittest
from datetime import datetime, timedelta, timezone

from domain.model.errors import DuplicateError, LoginIsOccupied
from domain.model.session import AccessTokenClaims
from domain.model.user import LoginField, User, UserPatch

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestLoginValues(unittest.TestCase):

    def test_user_login_values_skip_missing(self):
        user = User(id='u', created_at=NOW, updated_at=NOW, password_hash='h', name='Alice')
        self.assertEqual(user.login_values(), {LoginField.NAME: 'Alice'})

    def test_patch_login_values_exclude_password(self):
        patch = UserPatch(email='a@x.com', password='p')
        self.assertEqual(patch.login_values(), {LoginField.EMAIL: 'a@x.com'})
        self.assertFalse(patch.is_empty())

    def test_empty_patch(self):
        self.assertTrue(UserPatch().is_empty())
        self.assertFalse(UserPatch(password='p').is_empty())


class TestLoginIsOccupied(unittest.TestCase):

    def test_carries_field(self):
        error = LoginIsOccupied('phone')
        self.assertIsInstance(error, DuplicateError)
        self.assertEqual(error.field, LoginField.PHONE)
        self.assertEqual(str(error), 'phone is already occupied')


class TestAccessTokenClaims(unittest.TestCase):

    def test_expiry_is_exclusive_of_boundary(self):
        claims = AccessTokenClaims('u', NOW, NOW + timedelta(days=7))
        self.assertFalse(claims.is_expired(NOW + timedelta(days=7)))
        self.assertTrue(claims.is_expired(NOW + timedelta(days=7, microseconds=1)))
