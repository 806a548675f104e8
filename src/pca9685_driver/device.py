"""
PCA9685 device handle.

Translates logical operations (channel timing, frequency, mode flags,
group addressing) into register transactions on an injected
:class:`~pca9685_driver.transport.BusTransport`.

Every public operation records its outcome in a sticky last-error slot and
also returns a :class:`~pca9685_driver.errors.Result`, so callers can either
check each call or poll :meth:`PCA9685.last_error` the way firmware does.

Example:
    >>> pca = PCA9685(0x40, SMBusTransport(1))
    >>> if pca.begin():
    ...     pca.set_frequency(50)
    ...     pca.set_pwm(0, 0, 307)
"""

import time
from typing import Optional, Sequence, Tuple

from pca9685_driver import labels
from pca9685_driver.constants import (
    ALL_LED_FULL_OFF,
    ALL_LED_OFF_H,
    ALLCALLADR,
    DEFAULT_ADDRESS,
    DEFAULT_MODE1,
    DEFAULT_MODE2,
    INTERNAL_OSCILLATOR_HZ,
    LED0_ON_L,
    MAX_CHANNELS,
    MODE1,
    MODE1_ALLCALL,
    MODE1_RESTART,
    MODE1_SLEEP,
    MODE2,
    MODE_REGISTERS,
    OSCILLATOR_SETTLE_TIME,
    POWER_ON_FREQUENCY,
    PRE_SCALE,
    PWM_MASK,
    SUB_CALL_BITS,
    SUB_CALL_REGISTERS,
)
from pca9685_driver.errors import OK, ErrorCode, Result, failure
from pca9685_driver.logger import Logger
from pca9685_driver.output_enable import OutputEnablePin
from pca9685_driver.registers import (
    apply_bit,
    channel_register,
    clamp_frequency,
    decode_bus_address,
    decode_channel_block,
    encode_bus_address,
    encode_channel_block,
    encode_full_off,
    encode_full_on,
    frequency_from_prescale,
    prescale_from_frequency,
)
from pca9685_driver.transport import STATUS_OK, BusTransport, SMBusTransport

log = Logger().setup_logger('Device')


class PCA9685:
    """16-channel, 12-bit PWM controller on an I2C bus.

    Attributes
    ----------
    address : int
        7-bit bus address of the chip
    channel_count : int
        Number of channels the handle accepts (1..16)
    cached_frequency : int
        Last PWM frequency written to or read from the chip
    reference_clock_speed : int
        Oscillator frequency used for pre-scale arithmetic
    """

    def __init__(
        self,
        address: int = DEFAULT_ADDRESS,
        transport: Optional[BusTransport] = None,
        channel_count: int = MAX_CHANNELS,
        reference_clock_speed: int = INTERNAL_OSCILLATOR_HZ,
        output_enable: Optional[OutputEnablePin] = None,
    ) -> None:
        if not 1 <= channel_count <= MAX_CHANNELS:
            raise ValueError(labels.ERR_CHANNEL_COUNT.format(max_channels=MAX_CHANNELS, channel_count=channel_count))
        self._address = address
        self._transport = transport if transport is not None else SMBusTransport()
        self._channel_count = channel_count
        self._reference_clock_speed = reference_clock_speed
        self._output_enable = output_enable
        self._cached_frequency = POWER_ON_FREQUENCY
        self._error = ErrorCode.OK

    @property
    def address(self) -> int:
        return self._address

    @property
    def channel_count(self) -> int:
        return self._channel_count

    @property
    def cached_frequency(self) -> int:
        return self._cached_frequency

    @property
    def reference_clock_speed(self) -> int:
        return self._reference_clock_speed

    @property
    def transport(self) -> BusTransport:
        return self._transport

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    # ------------------------------------------------------------------
    # Register access
    # ------------------------------------------------------------------

    def _fail(self, error: ErrorCode) -> Result:
        self._error = error
        return failure(error)

    def _succeed(self, value=None) -> Result:
        self._error = ErrorCode.OK
        return OK if value is None else Result(value=value)

    def _write_register(self, register: int, data: bytes) -> Result:
        status = self._transport.write(self._address, bytes([register]) + bytes(data))
        if status != STATUS_OK:
            log.warning(labels.TRANSACTION_FAILED, register, status)
            return self._fail(ErrorCode.I2C)
        return self._succeed()

    def _read_registers(self, register: int, count: int) -> Result:
        status = self._transport.write(self._address, bytes([register]))
        if status != STATUS_OK:
            log.warning(labels.TRANSACTION_FAILED, register, status)
            return self._fail(ErrorCode.I2C)
        data = self._transport.read(self._address, count)
        if len(data) != count:
            log.warning(labels.TRANSPORT_SHORT_READ, self._address, len(data), count)
            return self._fail(ErrorCode.I2C)
        return self._succeed(bytes(data))

    def _read_register(self, register: int) -> Result:
        result = self._read_registers(register, 1)
        if not result.ok:
            return result
        return Result(value=result.value[0])

    def _check_channel(self, channel: int) -> bool:
        if 0 <= channel < self._channel_count:
            return True
        log.warning(labels.ERR_CHANNEL_OUT_OF_RANGE, channel, self._channel_count - 1)
        self._error = ErrorCode.CHANNEL
        return False

    # ------------------------------------------------------------------
    # Construction & connectivity
    # ------------------------------------------------------------------

    def begin(self, mode1_mask: int = DEFAULT_MODE1, mode2_mask: int = DEFAULT_MODE2) -> bool:
        """Start the transport, check the chip answers and configure it.

        Args:
            mode1_mask: Value written to MODE1.
            mode2_mask: Value written to MODE2.

        Returns:
            True if the chip acknowledged and both mode registers were written.
        """
        log.info(labels.DEVICE_BEGIN, self._address)
        self._transport.begin()
        if not self.is_connected():
            log.error(labels.DEVICE_NOT_FOUND, self._address)
            return False
        return self.configure(mode1_mask, mode2_mask).ok

    def is_connected(self) -> bool:
        """Address-only transaction; True when the chip acknowledged."""
        status = self._transport.write(self._address, b'')
        self._error = ErrorCode.OK if status == STATUS_OK else ErrorCode.I2C
        return status == STATUS_OK

    def configure(self, mode1_mask: int = DEFAULT_MODE1, mode2_mask: int = DEFAULT_MODE2) -> Result:
        """Write both mode registers, whatever they currently hold."""
        self._error = ErrorCode.OK
        mode1 = self._write_register(MODE1, bytes([mode1_mask & 0xFF]))
        mode2 = self._write_register(MODE2, bytes([mode2_mask & 0xFF]))
        if not (mode1.ok and mode2.ok):
            return self._fail(ErrorCode.I2C)
        log.info(labels.DEVICE_CONFIGURED, self._address, mode1_mask & 0xFF, mode2_mask & 0xFF)
        return OK

    def close(self) -> None:
        """Close the transport and release the OE pin, outputs disabled."""
        self._transport.close()
        if self._output_enable is not None:
            self._output_enable.disable()
            self._output_enable.cleanup()
        log.info(labels.DEVICE_CLOSED, self._address)

    # ------------------------------------------------------------------
    # Channel PWM control
    # ------------------------------------------------------------------

    def set_pwm(self, channel: int, on_time: int, off_time: Optional[int] = None) -> Result:
        """Set the duty timing pair of one channel.

        ``set_pwm(channel, off_time)`` is shorthand for
        ``set_pwm(channel, 0, off_time)``.

        Both counters are masked to 12 bits. The block is written in a
        single auto-increment transaction, so MODE1.AI must be set (it is
        part of the default ``begin`` configuration).
        """
        if off_time is None:
            on_time, off_time = 0, on_time
        if not self._check_channel(channel):
            return failure(ErrorCode.CHANNEL)
        if on_time & ~PWM_MASK or off_time & ~PWM_MASK:
            log.debug(labels.PWM_VALUE_MASKED, channel, on_time, off_time, on_time & PWM_MASK, off_time & PWM_MASK)
        return self._write_register(channel_register(channel), encode_channel_block(on_time, off_time))

    def get_pwm(self, channel: int) -> Result:
        """Read back ``(on_time, off_time)`` of one channel.

        The full-on/full-off flag (0x1000) is part of the returned values.
        A short read produces no value, use ``result.value_or(previous)``
        to keep what you had.
        """
        if not self._check_channel(channel):
            return failure(ErrorCode.CHANNEL)
        result = self._read_registers(channel_register(channel), 4)
        if not result.ok:
            return result
        return Result(value=decode_channel_block(result.value))

    def digital_write(self, channel: int, level) -> Result:
        """Drive a channel fully on or fully off through the flag bits.

        Any truthy ``level`` sets LEDn_ON_H bit 4 with zero counters; a low
        level sets LEDn_OFF_H bit 4, which the chip gives precedence.
        """
        if not self._check_channel(channel):
            return failure(ErrorCode.CHANNEL)
        block = encode_full_on() if level else encode_full_off()
        return self._write_register(channel_register(channel), block)

    def all_off(self) -> Result:
        """Force every output off with one write to ALL_LED_OFF_H."""
        return self._write_register(ALL_LED_OFF_H, bytes([ALL_LED_FULL_OFF]))

    def set_pwm_all(self, values: Sequence[Tuple[int, int]]) -> Result:
        """Write the timing pairs of every channel in one transaction.

        Parameters
        ----------
        values : Sequence[Tuple[int, int]]
            One ``(on_time, off_time)`` pair per channel, ``channel_count`` long.

        Raises
        ------
        ValueError
            If the number of pairs does not match ``channel_count``
        """
        if len(values) != self._channel_count:
            raise ValueError(labels.ERR_CHANNEL_VALUES.format(expected=self._channel_count, actual=len(values)))
        payload = b''.join(encode_channel_block(on_time, off_time) for on_time, off_time in values)
        return self._write_register(LED0_ON_L, payload)

    # ------------------------------------------------------------------
    # Frequency control
    # ------------------------------------------------------------------

    def set_frequency(self, frequency: int, offset: int = 0) -> Result:
        """Set the PWM frequency shared by all channels.

        ``frequency`` is clamped to 24..1526 Hz. ``offset`` is added to the
        computed PRE_SCALE value to trim oscillator drift.

        PRE_SCALE only accepts writes while the oscillator sleeps, so MODE1
        is read, written back with SLEEP set, PRE_SCALE is written, and the
        original MODE1 value is restored. The restore is attempted even when
        the PRE_SCALE write failed. The cached frequency only changes when
        every transaction succeeded.
        """
        clamped = clamp_frequency(frequency)
        if clamped != frequency:
            log.debug(labels.FREQUENCY_CLAMPED, frequency, clamped)
        scaler = prescale_from_frequency(clamped, self._reference_clock_speed, offset)

        current = self._read_register(MODE1)
        if not current.ok:
            return current
        old_mode = current.value

        # RESTART is write-one-to-clear, keep it out of the sleep value
        sleep_mode = apply_bit(old_mode & ~MODE1_RESTART, MODE1_SLEEP, True)
        entered = self._write_register(MODE1, bytes([sleep_mode]))
        if not entered.ok:
            return entered

        written = self._write_register(PRE_SCALE, bytes([scaler]))
        restored = self._write_register(MODE1, bytes([old_mode]))
        if not restored.ok:
            log.error(labels.FREQUENCY_RESTORE_FAILED, old_mode)
        if not (written.ok and restored.ok):
            return self._fail(ErrorCode.I2C)

        if not old_mode & MODE1_SLEEP:
            time.sleep(OSCILLATOR_SETTLE_TIME)
        self._cached_frequency = clamped
        log.info(labels.FREQUENCY_SET, clamped, scaler)
        return OK

    def get_frequency(self, use_cache: bool = True) -> Result:
        """Return the PWM frequency in Hz.

        With ``use_cache`` the cached value is returned without bus traffic.
        Otherwise PRE_SCALE is read and converted back; integer rounding in
        both directions means the two may differ by a few Hz.
        """
        if use_cache:
            return self._succeed(self._cached_frequency)
        scaler = self._read_register(PRE_SCALE)
        if not scaler.ok:
            return scaler
        self._cached_frequency = frequency_from_prescale(scaler.value, self._reference_clock_speed)
        return Result(value=self._cached_frequency)

    # ------------------------------------------------------------------
    # Mode registers
    # ------------------------------------------------------------------

    def write_mode(self, register: int, value: int) -> Result:
        if register not in MODE_REGISTERS:
            log.warning(labels.ERR_MODE_REGISTER, register)
            return self._fail(ErrorCode.MODE)
        return self._write_register(register, bytes([value & 0xFF]))

    def read_mode(self, register: int) -> Result:
        if register not in MODE_REGISTERS:
            log.warning(labels.ERR_MODE_REGISTER, register)
            return self._fail(ErrorCode.MODE)
        return self._read_register(register)

    def _update_mode1_bit(self, mask: int, enable: bool) -> Result:
        current = self._read_register(MODE1)
        if not current.ok:
            return current
        updated = apply_bit(current.value, mask, enable)
        if updated == current.value:
            return OK
        return self._write_register(MODE1, bytes([updated]))

    def _mode1_bit(self, mask: int) -> Result:
        current = self._read_register(MODE1)
        if not current.ok:
            return current
        return Result(value=bool(current.value & mask))

    def _check_sub_call(self, nr: int) -> bool:
        if nr in SUB_CALL_BITS:
            return True
        log.warning(labels.ERR_SUB_CALL_NUMBER, nr)
        self._error = ErrorCode.ERROR
        return False

    def _check_bus_address(self, address: int) -> bool:
        if 0 <= address <= 0x7F:
            return True
        log.warning(labels.ERR_BUS_ADDRESS, address)
        self._error = ErrorCode.ERROR
        return False

    # ------------------------------------------------------------------
    # Sub-call / all-call addressing
    # ------------------------------------------------------------------

    def enable_sub_call(self, nr: int) -> Result:
        """Make the chip answer on sub-call address ``nr`` (1..3)."""
        if not self._check_sub_call(nr):
            return failure(ErrorCode.ERROR)
        return self._update_mode1_bit(SUB_CALL_BITS[nr], True)

    def disable_sub_call(self, nr: int) -> Result:
        if not self._check_sub_call(nr):
            return failure(ErrorCode.ERROR)
        return self._update_mode1_bit(SUB_CALL_BITS[nr], False)

    def is_enabled_sub_call(self, nr: int) -> Result:
        if not self._check_sub_call(nr):
            return failure(ErrorCode.ERROR)
        return self._mode1_bit(SUB_CALL_BITS[nr])

    def set_sub_call_address(self, nr: int, address: int) -> Result:
        """Store the 7-bit sub-call address ``nr``.

        The chip keeps it in register bits 7:1, so ``address`` is the bus
        address (e.g. 0x71), not the raw register value (0xE2). Values
        outside 0..0x7F fail with ``ErrorCode.ERROR`` and no I/O. The address
        is not checked against the device address or the other group
        addresses.
        """
        if not self._check_sub_call(nr) or not self._check_bus_address(address):
            return failure(ErrorCode.ERROR)
        return self._write_register(SUB_CALL_REGISTERS[nr], bytes([encode_bus_address(address)]))

    def get_sub_call_address(self, nr: int) -> Result:
        if not self._check_sub_call(nr):
            return failure(ErrorCode.ERROR)
        value = self._read_register(SUB_CALL_REGISTERS[nr])
        if not value.ok:
            return value
        return Result(value=decode_bus_address(value.value))

    def enable_all_call(self) -> Result:
        return self._update_mode1_bit(MODE1_ALLCALL, True)

    def disable_all_call(self) -> Result:
        return self._update_mode1_bit(MODE1_ALLCALL, False)

    def is_enabled_all_call(self) -> Result:
        return self._mode1_bit(MODE1_ALLCALL)

    def set_all_call_address(self, address: int) -> Result:
        """Store the 7-bit all-call address, same layout as the sub-call ones."""
        if not self._check_bus_address(address):
            return failure(ErrorCode.ERROR)
        return self._write_register(ALLCALLADR, bytes([encode_bus_address(address)]))

    def get_all_call_address(self) -> Result:
        value = self._read_register(ALLCALLADR)
        if not value.ok:
            return value
        return Result(value=decode_bus_address(value.value))

    # ------------------------------------------------------------------
    # Output enable pin
    # ------------------------------------------------------------------

    def set_output_enable(self, enabled: bool) -> bool:
        """Drive the OE pin, if one was given. Returns False without a pin."""
        if self._output_enable is None:
            return False
        if enabled:
            self._output_enable.enable()
        else:
            self._output_enable.disable()
        return True

    def get_output_enable(self) -> Optional[bool]:
        if self._output_enable is None:
            return None
        return self._output_enable.is_enabled()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def last_error(self) -> ErrorCode:
        """Return the sticky error code and reset it to OK."""
        error = self._error
        self._error = ErrorCode.OK
        return error
