"""Tests for MongoUserRepository with a mocked collection."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import LoginIsOccupied, NotFoundError, ValidationError
from domain.model.user import LoginField

NOW = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)


def _user_doc(**kwargs) -> dict:
    doc = {
        '_id': 'user-1',
        'email': 'alice89@example.com',
        'name': 'Alice',
        'phone': '+79998887766',
        'password_hash': '$2b$12$hash',
        'created_at': NOW,
        'updated_at': NOW,
    }
    doc.update(kwargs)
    return doc


def _duplicate(field: str) -> DuplicateKeyError:
    return DuplicateKeyError(
        f"E11000 duplicate key error collection: multilogin.users index: idx_users_{field} dup key",
        11000,
        {'keyPattern': {field: 1}, 'keyValue': {field: 'x'}},
    )


class MongoUserRepositoryTestCase(unittest.TestCase):
    def setUp(self):
        self.collection = MagicMock()
        db = MagicMock()
        db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(db)
        db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)


class TestCreate(MongoUserRepositoryTestCase):

    @patch('adapter.mongodb.user_repository.uuid')
    def test_create_inserts_only_present_logins(self, mock_uuid):
        mock_uuid.uuid4.return_value.hex = 'new-user-id'

        user = self.repo.create(password_hash='$2b$12$hash', email='a@example.com', phone='+1')

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], 'new-user-id')
        self.assertEqual(doc['email'], 'a@example.com')
        self.assertEqual(doc['phone'], '+1')
        self.assertNotIn('name', doc)
        self.assertEqual(user.id, 'new-user-id')
        self.assertIsNone(user.name)

    def test_create_maps_duplicate_key_to_occupied_field(self):
        for field in LoginField:
            with self.subTest(field=field):
                self.collection.insert_one.side_effect = _duplicate(field.value)
                with self.assertRaises(LoginIsOccupied) as ctx:
                    self.repo.create(password_hash='h', email='a@example.com', name='A', phone='+1')
                self.assertEqual(ctx.exception.field, field)

    def test_create_reads_field_from_message_without_key_pattern(self):
        self.collection.insert_one.side_effect = DuplicateKeyError(
            "E11000 duplicate key error index: idx_users_name dup key", 11000, {}
        )
        with self.assertRaises(LoginIsOccupied) as ctx:
            self.repo.create(password_hash='h', name='Alice')
        self.assertEqual(ctx.exception.field, LoginField.NAME)

    def test_create_propagates_storage_errors(self):
        self.collection.insert_one.side_effect = PyMongoError("connection reset")
        with self.assertRaises(PyMongoError):
            self.repo.create(password_hash='h', name='Alice')

    def test_create_validates_input(self):
        with self.assertRaises(ValidationError):
            self.repo.create(password_hash='h')
        with self.assertRaises(ValidationError):
            self.repo.create(password_hash='', name='Alice')
        self.collection.insert_one.assert_not_called()


class TestUpdate(MongoUserRepositoryTestCase):

    def test_update_uses_single_atomic_set(self):
        self.collection.find_one_and_update.return_value = _user_doc(name='newName')

        user = self.repo.update('user-1', {'name': 'newName', 'password_hash': 'h2'})

        self.assertEqual(user.name, 'newName')
        filter_, update = self.collection.find_one_and_update.call_args[0]
        self.assertEqual(filter_, {'_id': 'user-1'})
        self.assertEqual(update['$set']['name'], 'newName')
        self.assertEqual(update['$set']['password_hash'], 'h2')
        self.assertIn('updated_at', update['$set'])
        self.assertEqual(
            self.collection.find_one_and_update.call_args[1]['return_document'],
            ReturnDocument.AFTER,
        )

    def test_update_missing_user(self):
        self.collection.find_one_and_update.return_value = None
        with self.assertRaises(NotFoundError):
            self.repo.update('missing', {'name': 'x'})

    def test_update_duplicate_key(self):
        self.collection.find_one_and_update.side_effect = _duplicate('phone')
        with self.assertRaises(LoginIsOccupied) as ctx:
            self.repo.update('user-1', {'phone': '+1'})
        self.assertEqual(ctx.exception.field, LoginField.PHONE)

    def test_update_rejects_unknown_fields(self):
        with self.assertRaises(ValidationError):
            self.repo.update('user-1', {'_id': 'other'})
        self.collection.find_one_and_update.assert_not_called()


class TestReads(MongoUserRepositoryTestCase):

    def test_get_by_field_queries_that_field_only(self):
        self.collection.find_one.return_value = _user_doc()

        user = self.repo.get_by_field(LoginField.PHONE, '+79998887766')

        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.password_hash, '$2b$12$hash')
        self.collection.find_one.assert_called_once_with({'phone': '+79998887766'})

    def test_get_by_id_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_id('missing'))

    def test_clear(self):
        self.collection.delete_many.return_value.deleted_count = 3
        self.assertEqual(self.repo.clear(), 3)
        self.collection.delete_many.assert_called_once_with({})


class TestEnsureIndexes(MongoUserRepositoryTestCase):

    def test_unique_partial_index_per_login_field(self):
        self.assertTrue(self.repo.ensure_indexes())

        calls = {c[1]['name']: c for c in self.collection.create_index.call_args_list}
        for field in LoginField:
            call = calls[f'idx_users_{field.value}']
            self.assertEqual(call[0][0], [(field.value, 1)])
            self.assertTrue(call[1]['unique'])
            self.assertEqual(
                call[1]['partialFilterExpression'], {field.value: {'$type': 'string'}}
            )

    def test_index_failure_returns_false(self):
        self.collection.create_index.side_effect = PyMongoError("boom")
        self.assertFalse(self.repo.ensure_indexes())
