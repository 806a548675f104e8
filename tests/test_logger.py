import logging

import pytest

from pca9685_driver.logger import LOG_DIR_ENV, Logger
from pca9685_driver.singleton import Singleton


@pytest.fixture
def fresh_logger():
    Singleton.reset(Logger)
    yield
    Singleton.reset(Logger)


def test_no_log_folder_without_environment(monkeypatch, tmp_path, fresh_logger):
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    logger = Logger().setup_logger('Quiet')
    assert isinstance(Logger().logging_file_handler, logging.NullHandler)
    logger.info('nothing written')
    assert list(tmp_path.iterdir()) == []


def test_log_folder_from_environment(monkeypatch, tmp_path, fresh_logger):
    folder = tmp_path / 'logs'
    monkeypatch.setenv(LOG_DIR_ENV, str(folder))
    logger = Logger().setup_logger('Bus')
    assert folder.is_dir()
    assert not (folder / 'PCA9685.log').exists()
    logger.info('bus opened')
    Logger().logging_file_handler.flush()
    assert 'PCA9685 Bus' in (folder / 'PCA9685.log').read_text()
    Logger().logging_file_handler.close()


def test_stream_handler_only_on_request(fresh_logger):
    logger = Logger().setup_logger('Console check', enable_stream_handler=True, level=logging.DEBUG)
    assert Logger().logging_stream_handler in logger.handlers
    assert logger.level == logging.DEBUG
    assert Logger().setup_logger('Console check') is logger
