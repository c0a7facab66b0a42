"""Tests for structured JSON logging."""

import json
import logging
import unittest
from unittest.mock import patch

from utils.logging import REDACTED, JSONFormatter, setup_structured_logging


def _record(msg: str = "User signed in", **extra) -> logging.LogRecord:
    record = logging.LogRecord('services.auth_service', logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_basic_fields(self):
        data = json.loads(self.formatter.format(_record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'services.auth_service')
        self.assertEqual(data['message'], 'User signed in')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_extra_fields_included(self):
        data = json.loads(self.formatter.format(_record(userId='user-1', field='email')))
        self.assertEqual(data['userId'], 'user-1')
        self.assertEqual(data['field'], 'email')

    def test_credentials_are_redacted(self):
        record = _record(password='150689', token='eyJ...', password_hash='$2b$12$x')
        output = self.formatter.format(record)

        self.assertNotIn('150689', output)
        self.assertNotIn('eyJ', output)
        data = json.loads(output)
        self.assertEqual(data['password'], REDACTED)
        self.assertEqual(data['token'], REDACTED)

    def test_non_json_values_are_stringified(self):
        data = json.loads(self.formatter.format(_record(fields={'name'})))
        self.assertEqual(data['fields'], "{'name'}")


class TestSetupStructuredLogging(unittest.TestCase):

    def tearDown(self):
        logging.getLogger().setLevel(logging.WARNING)

    @patch.dict('os.environ', {'LOG_LEVEL': 'debug'})
    def test_level_from_environment(self):
        setup_structured_logging()
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)

    def test_explicit_level(self):
        setup_structured_logging('warning')
        self.assertEqual(logging.getLogger().level, logging.WARNING)
