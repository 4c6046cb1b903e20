"""
Tests for connection descriptor handling and configuration errors.
"""
import io
from unittest.mock import patch

import pytest
import sqlalchemy as sa
from schemaexport import ConfigurationError, ExportNotSupportedError
from schemaexport import Schema, SqliteExporter
from schemaexport import connection
from schemaexport.connection import create_file_url, create_url, dispose_engine
from schemaexport.connection import get_engine_for_url
from schemaexport.options import ExportOptions


@pytest.fixture
def options():
    return ExportOptions()


@pytest.mark.parametrize('target', [None, '', '   '])
def test_missing_connection_string(options, target):
    with pytest.raises(ConfigurationError, match='Connection string is required'):
        create_url(target, options)


@pytest.mark.parametrize('target', ['not a url', 'Data Source=mock.db;Mode=ReadWriteCreate'])
def test_unparsable_connection_string(options, target):
    with pytest.raises(ConfigurationError):
        create_url(target, options)


def test_other_dialect_rejected(options):
    with pytest.raises(ConfigurationError, match='sqlite'):
        create_url('postgresql://user@localhost/db', options)


def test_url_passthrough(options):
    url = sa.make_url('sqlite:///mock.db')
    assert create_url(url, options) is url
    assert create_url('sqlite:///mock.db', options).database == 'mock.db'


def test_file_url_create_mode(options, tmp_path):
    url = create_file_url(str(tmp_path / 'mock.db'), options)
    assert url.get_backend_name() == 'sqlite'
    assert url.database.startswith('file:')
    assert url.database.endswith('/mock.db')
    assert url.query['mode'] == 'rwc'
    assert url.query['uri'] == 'true'


def test_file_url_existing_mode(options, tmp_path):
    url = create_file_url(str(tmp_path / 'mock.db'), options, create_if_missing=False)
    assert url.query['mode'] == 'rw'


def test_missing_file_path(options):
    with pytest.raises(ConfigurationError, match='File path is required'):
        create_file_url('', options)


def test_engine_registry_reuses_engines():
    url = sa.make_url('sqlite://')
    assert get_engine_for_url(url) is get_engine_for_url(url)


def test_dispose_engine_drops_registry_entry():
    url = sa.make_url('sqlite:///registry.db')
    first = get_engine_for_url(url)
    dispose_engine(url)
    assert url.render_as_string(hide_password=False) not in connection._engine_registry
    assert get_engine_for_url(url) is not first
    dispose_engine(url)
    dispose_engine(url)


def test_configuration_error_raised_before_io():
    """No engine is created when the target is invalid"""
    with patch('schemaexport.connection.get_engine_for_url') as engine_for_url:
        with pytest.raises(ConfigurationError):
            SqliteExporter().export_to_database(Schema(), {}, '')
        with pytest.raises(ValueError):
            SqliteExporter().export_to_file(Schema(), {}, '  ')
    engine_for_url.assert_not_called()


def test_stream_export_not_supported():
    with pytest.raises(ExportNotSupportedError, match='export_to_database'):
        SqliteExporter().export(Schema(), {}, io.BytesIO())


if __name__ == '__main__':
    __import__('pytest').main([__file__])
