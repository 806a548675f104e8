"""
Bus transports used by the PCA9685 driver.

A transport owns the I2C bus and performs complete transactions. It never
raises for bus-level failures: writes report a status code and reads return
however many bytes actually arrived, the same contract the driver expects
from any test double.
"""

import errno
from abc import ABC, abstractmethod
from typing import Optional

from smbus2 import SMBus, i2c_msg  # type: ignore

from pca9685_driver import labels
from pca9685_driver.constants import DEFAULT_I2C_BUS, DEFAULT_I2C_FREQUENCY
from pca9685_driver.logger import Logger

log = Logger().setup_logger('Transport')

# Transaction status codes (same numbering as Arduino's endTransmission)
STATUS_OK = 0
STATUS_DATA_TOO_LONG = 1
STATUS_ADDRESS_NACK = 2
STATUS_DATA_NACK = 3
STATUS_OTHER = 4
STATUS_TIMEOUT = 5


def status_from_os_error(error: OSError) -> int:
    """Map an ``OSError`` raised by the kernel I2C layer to a status code."""
    if error.errno in (errno.ENXIO, getattr(errno, 'EREMOTEIO', 121)):
        return STATUS_ADDRESS_NACK
    if error.errno == errno.EIO:
        return STATUS_DATA_NACK
    if error.errno in (errno.ETIMEDOUT, errno.EAGAIN, errno.EBUSY):
        return STATUS_TIMEOUT
    return STATUS_OTHER


class BusTransport(ABC):
    """Minimal I2C master interface needed by the driver."""

    @abstractmethod
    def begin(self) -> None:
        """Open the bus. Calling it again on an open bus does nothing."""

    @abstractmethod
    def write(self, address: int, data: bytes) -> int:
        """Write ``data`` in one transaction and return a status code.

        An empty ``data`` performs an address-only transaction.
        """

    @abstractmethod
    def read(self, address: int, count: int) -> bytes:
        """Read up to ``count`` bytes; a failed read returns fewer bytes."""

    def close(self) -> None:
        pass

    def __enter__(self):
        self.begin()
        return self

    def __exit__(self, *_):
        self.close()


class SMBusTransport(BusTransport):
    """Linux i2c-dev transport built on smbus2 combined transactions.

    Args:
        bus: I2C bus number (1 on a Raspberry Pi).
    """

    def __init__(self, bus: int = DEFAULT_I2C_BUS):
        self.bus_number = bus
        self._bus: Optional[SMBus] = None

    def begin(self) -> None:
        if self._bus is None:
            self._bus = SMBus(self.bus_number)
            log.info(labels.TRANSPORT_OPENED, self.bus_number)

    def _require_bus(self) -> SMBus:
        if self._bus is None:
            raise RuntimeError(labels.ERR_TRANSPORT_NOT_STARTED)
        return self._bus

    def write(self, address: int, data: bytes) -> int:
        bus = self._require_bus()
        try:
            if data:
                bus.i2c_rdwr(i2c_msg.write(address, list(data)))
            else:
                bus.write_quick(address)
        except OSError as e:
            log.warning(labels.TRANSPORT_WRITE_FAILED, len(data), address, e)
            return status_from_os_error(e)
        return STATUS_OK

    def read(self, address: int, count: int) -> bytes:
        bus = self._require_bus()
        msg = i2c_msg.read(address, count)
        try:
            bus.i2c_rdwr(msg)
        except OSError as e:
            log.warning(labels.TRANSPORT_READ_FAILED, count, address, e)
            return b''
        return bytes(list(msg))

    def close(self) -> None:
        if self._bus is not None:
            self._bus.close()
            self._bus = None


class BusioTransport(BusTransport):
    """Adafruit Blinka ``busio.I2C`` transport on the board's SCL/SDA pins.

    Blinka probes the platform when ``board`` is imported, so the import is
    deferred to :meth:`begin`.

    Args:
        frequency: Bus clock in Hz.
    """

    def __init__(self, frequency: int = DEFAULT_I2C_FREQUENCY):
        self.frequency = frequency
        self._i2c = None

    def begin(self) -> None:
        if self._i2c is not None:
            return
        import board  # type: ignore
        import busio  # type: ignore

        self._i2c = busio.I2C(board.SCL, board.SDA, frequency=self.frequency)
        log.info(labels.TRANSPORT_OPENED, 'board.SCL/board.SDA')

    def _lock(self):
        if self._i2c is None:
            raise RuntimeError(labels.ERR_TRANSPORT_NOT_STARTED)
        while not self._i2c.try_lock():
            pass
        return self._i2c

    def write(self, address: int, data: bytes) -> int:
        i2c = self._lock()
        try:
            i2c.writeto(address, bytes(data))
        except OSError as e:
            log.warning(labels.TRANSPORT_WRITE_FAILED, len(data), address, e)
            return status_from_os_error(e)
        finally:
            i2c.unlock()
        return STATUS_OK

    def read(self, address: int, count: int) -> bytes:
        i2c = self._lock()
        buffer = bytearray(count)
        try:
            i2c.readfrom_into(address, buffer)
        except OSError as e:
            log.warning(labels.TRANSPORT_READ_FAILED, count, address, e)
            return b''
        finally:
            i2c.unlock()
        return bytes(buffer)

    def close(self) -> None:
        if self._i2c is not None:
            self._i2c.deinit()
            self._i2c = None
