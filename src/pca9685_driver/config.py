"""
JSON configuration for the PCA9685 driver.

Usage examples:
    config = Config()

    address = config.get_address()
    frequency = config.pca9685.frequency
    transport = config.pca9685.get('transport', 'smbus2')

The file is looked up at ``$PCA9685_CONFIG`` or ``~/pca9685.json``; missing
keys fall back to :data:`DEFAULT_CONFIG`.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pca9685_driver import labels
from pca9685_driver.constants import (
    DEFAULT_ADDRESS,
    DEFAULT_I2C_BUS,
    DEFAULT_I2C_FREQUENCY,
    DEFAULT_MODE1,
    DEFAULT_MODE2,
    INTERNAL_OSCILLATOR_HZ,
    MAX_CHANNELS,
)
from pca9685_driver.dot_dict import DotDict
from pca9685_driver.errors import ConfigurationError
from pca9685_driver.logger import Logger
from pca9685_driver.singleton import Singleton

log = Logger().setup_logger('Configuration')

CONFIG_ENV = 'PCA9685_CONFIG'
TRANSPORTS = ('smbus2', 'busio')

DEFAULT_CONFIG: Dict[str, Any] = {
    'pca9685': {
        'transport': 'smbus2',
        'bus': DEFAULT_I2C_BUS,
        'i2c_frequency': DEFAULT_I2C_FREQUENCY,
        'address': hex(DEFAULT_ADDRESS),
        'channel_count': MAX_CHANNELS,
        'reference_clock_speed': INTERNAL_OSCILLATOR_HZ,
        'frequency': 50,
        'frequency_offset': 0,
        'mode1': hex(DEFAULT_MODE1),
        'mode2': hex(DEFAULT_MODE2),
        'output_enable_gpio': None,
    },
}


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV, Path.home() / 'pca9685.json'))


class Config(metaclass=Singleton):
    """Driver configuration with dot notation access."""

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else default_config_path()
        self._raw_data: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._config = DotDict(self._raw_data)
        self.load_config()

    def load_config(self) -> None:
        """Merge the JSON file, if any, over the defaults.

        Raises:
            ConfigurationError: If the file exists but is not valid JSON, its
                root or ``pca9685`` section is not an object, or it names an
                unknown transport.
        """
        if not self._path.exists():
            log.info(labels.CONFIG_DEFAULTS, self._path)
            return

        with open(self._path, encoding='utf-8') as json_file:
            try:
                loaded = json.load(json_file)
            except json.JSONDecodeError as e:
                log.error(labels.ERR_CONFIG_INVALID_JSON.format(path=self._path, error=e))
                raise ConfigurationError(labels.ERR_CONFIG_INVALID_JSON.format(path=self._path, error=e)) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(labels.ERR_CONFIG_NOT_OBJECT.format(
                what='root', path=self._path, kind=type(loaded).__name__))
        if not isinstance(loaded.get('pca9685', {}), dict):
            raise ConfigurationError(labels.ERR_CONFIG_NOT_OBJECT.format(
                what="section 'pca9685'", path=self._path, kind=type(loaded['pca9685']).__name__))

        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(self._raw_data.get(section), dict):
                self._raw_data[section].update(values)
            else:
                self._raw_data[section] = values

        transport = self._raw_data['pca9685']['transport']
        if transport not in TRANSPORTS:
            raise ConfigurationError(labels.ERR_CONFIG_UNKNOWN_TRANSPORT.format(transport=transport, choices=TRANSPORTS))
        log.info(labels.CONFIG_LOADED, self._path)

    def __getattr__(self, key: str) -> Any:
        """
        Enable dot notation access on Config object itself.
        Example: config.pca9685 instead of config._config.pca9685
        """
        if key.startswith('_'):
            return object.__getattribute__(self, key)
        return getattr(self._config, key)

    def __getitem__(self, key: str) -> Any:
        return self._config[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return self._raw_data

    # Convenience accessors for the pca9685 section

    def get_transport(self) -> str:
        return self.pca9685.transport

    def get_bus(self) -> int:
        return self.pca9685.get_int('bus')

    def get_i2c_frequency(self) -> int:
        return self.pca9685.get_int('i2c_frequency')

    def get_address(self) -> int:
        return self.pca9685.get_int('address')

    def get_channel_count(self) -> int:
        return self.pca9685.get_int('channel_count')

    def get_reference_clock_speed(self) -> int:
        return self.pca9685.get_int('reference_clock_speed')

    def get_frequency(self) -> int:
        return self.pca9685.get_int('frequency')

    def get_frequency_offset(self) -> int:
        return self.pca9685.get_int('frequency_offset')

    def get_mode1(self) -> int:
        return self.pca9685.get_int('mode1')

    def get_mode2(self) -> int:
        return self.pca9685.get_int('mode2')

    def get_output_enable_gpio(self) -> Optional[int]:
        return self.pca9685.get_int('output_enable_gpio')
