import os
import tempfile

os.environ.setdefault('PCA9685_LOG_DIR', tempfile.mkdtemp(prefix='pca9685-logs-'))

import pytest  # noqa: E402

from pca9685_driver.constants import (  # noqa: E402
    ALLCALLADR,
    MODE1,
    MODE1_SLEEP,
    MODE2,
    PRE_SCALE,
    SUBADR1,
    SUBADR2,
    SUBADR3,
)
from pca9685_driver.device import PCA9685  # noqa: E402
from pca9685_driver.transport import STATUS_ADDRESS_NACK, STATUS_DATA_NACK, STATUS_OK, BusTransport  # noqa: E402


class FakeBus(BusTransport):
    """In-memory PCA9685 register file behind the transport interface.

    Writes set the register pointer and store data with auto-increment;
    reads return bytes from the pointer. PRE_SCALE ignores writes unless
    MODE1.SLEEP is set, like the chip.
    """

    def __init__(self, address=0x40):
        self.address = address
        self.registers = bytearray(256)
        self.registers[MODE1] = 0x11
        self.registers[MODE2] = 0x04
        self.registers[SUBADR1] = 0xE2
        self.registers[SUBADR2] = 0xE4
        self.registers[SUBADR3] = 0xE8
        self.registers[ALLCALLADR] = 0xE0
        self.registers[PRE_SCALE] = 0x1E
        self.pointer = 0
        self.writes = []
        self.reads = []
        self.begun = False
        self.closed = False
        self.nack = False
        self.fail_register = None
        self.short_read = None

    @property
    def transactions(self):
        return len(self.writes) + len(self.reads)

    def data_writes(self, register=None):
        """Writes carrying data, optionally only those aimed at ``register``."""
        return [data for _, data in self.writes if len(data) > 1 and (register is None or data[0] == register)]

    def begin(self):
        self.begun = True

    def close(self):
        self.closed = True

    def write(self, address, data):
        data = bytes(data)
        self.writes.append((address, data))
        if self.nack or address != self.address:
            return STATUS_ADDRESS_NACK
        if data and data[0] == self.fail_register:
            return STATUS_DATA_NACK
        if data:
            self.pointer = data[0]
            for offset, value in enumerate(data[1:]):
                register = (self.pointer + offset) & 0xFF
                if register == PRE_SCALE and not self.registers[MODE1] & MODE1_SLEEP:
                    continue
                self.registers[register] = value
        return STATUS_OK

    def read(self, address, count):
        self.reads.append((address, count))
        if self.nack or address != self.address:
            return b''
        available = count if self.short_read is None else min(count, self.short_read)
        return bytes(self.registers[(self.pointer + i) & 0xFF] for i in range(available))


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def pca(bus):
    """A started PCA9685 with the bus history cleared."""
    device = PCA9685(0x40, bus)
    assert device.begin()
    bus.writes.clear()
    bus.reads.clear()
    return device
