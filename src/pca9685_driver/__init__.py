"""
Driver for the NXP PCA9685 16-channel, 12-bit PWM controller on I2C.
"""

from pca9685_driver.device import PCA9685
from pca9685_driver.errors import ConfigurationError, ErrorCode, PCA9685Error, Result
from pca9685_driver.factory import PCA9685Factory
from pca9685_driver.output_enable import OutputEnablePin
from pca9685_driver.transport import BusioTransport, BusTransport, SMBusTransport

__version__ = '0.3.0'

__all__ = [
    'PCA9685',
    'PCA9685Factory',
    'PCA9685Error',
    'ConfigurationError',
    'ErrorCode',
    'Result',
    'BusTransport',
    'SMBusTransport',
    'BusioTransport',
    'OutputEnablePin',
]
