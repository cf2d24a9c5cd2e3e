#!/usr/bin/env python3
"""Tests for environment variable readers."""

import os
from unittest.mock import patch

from nebula_mapper.core.env_utils import getenv_bool, getenv_clean, getenv_int, getenv_list, getenv_upper


class TestEnvUtils:
    """Test suite for environment variable readers."""

    @patch.dict(os.environ, {'NEBULA_MAPPER_X': '  value\r\n'})
    def test_getenv_clean_strips_line_endings(self):
        """Test that CRLF endings from .env files are removed."""
        assert getenv_clean('NEBULA_MAPPER_X') == 'value'

    @patch.dict(os.environ, {}, clear=True)
    def test_unset_variables_use_defaults(self):
        """Test the fallbacks for unset variables."""
        assert getenv_clean('NEBULA_MAPPER_X', 'd') == 'd'
        assert getenv_upper('NEBULA_MAPPER_X') is None
        assert getenv_bool('NEBULA_MAPPER_X', True) is True
        assert getenv_int('NEBULA_MAPPER_X', 7) == 7
        assert getenv_list('NEBULA_MAPPER_X', ['a']) == ['a']

    @patch.dict(os.environ, {'NEBULA_MAPPER_X': 'warning'})
    def test_getenv_upper(self):
        assert getenv_upper('NEBULA_MAPPER_X') == 'WARNING'

    @patch.dict(os.environ, {'NEBULA_MAPPER_X': ''})
    def test_getenv_upper_empty_is_unset(self):
        assert getenv_upper('NEBULA_MAPPER_X') is None

    def test_getenv_bool_values(self):
        """Test recognised and unrecognised boolean spellings."""
        for raw, expected in [('ON', True), ('yes', True), ('0', False), ('off', False), ('maybe', True)]:
            with patch.dict(os.environ, {'NEBULA_MAPPER_X': raw}):
                assert getenv_bool('NEBULA_MAPPER_X', True) is expected

    @patch.dict(os.environ, {'NEBULA_MAPPER_X': 'ten'})
    def test_getenv_int_invalid_uses_default(self):
        assert getenv_int('NEBULA_MAPPER_X', 500) == 500

    @patch.dict(os.environ, {'NEBULA_MAPPER_X': ' a , ,b '})
    def test_getenv_list_drops_empty_items(self):
        assert getenv_list('NEBULA_MAPPER_X') == ['a', 'b']

    @patch.dict(os.environ, {'NEBULA_MAPPER_X': ' , '})
    def test_getenv_list_all_empty_uses_default(self):
        assert getenv_list('NEBULA_MAPPER_X', ['x']) == ['x']
