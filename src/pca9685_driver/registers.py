"""
Pure encode/decode helpers for the PCA9685 register layout.

Nothing in here touches a bus: values go in, bytes or integers come out.
"""

from typing import Tuple

from pca9685_driver.constants import (
    CHANNEL_STRIDE,
    FULL_ON_OFF_BIT,
    INTERNAL_OSCILLATOR_HZ,
    LED0_ON_L,
    MAX_FREQUENCY,
    MAX_PRE_SCALE,
    MIN_FREQUENCY,
    MIN_PRE_SCALE,
    PWM_MASK,
    PWM_RESOLUTION,
)


def channel_register(channel: int) -> int:
    """Return the LEDn_ON_L register address of ``channel``."""
    return LED0_ON_L + channel * CHANNEL_STRIDE


def _pack_counters(on_time: int, off_time: int) -> bytes:
    return bytes([
        on_time & 0xFF,
        (on_time >> 8) & 0xFF,
        off_time & 0xFF,
        (off_time >> 8) & 0xFF,
    ])


def encode_channel_block(on_time: int, off_time: int) -> bytes:
    """Encode a duty timing pair into ON_L, ON_H, OFF_L, OFF_H.

    Both counters are masked to 12 bits, so out-of-range values wrap
    explicitly and can never set the full-on/full-off flag by accident.
    Callers relying on the wrap (phase-shifted "figure-8" patterns) get the
    low 12 bits of whatever they pass.

    Args:
        on_time: Tick at which the output turns on.
        off_time: Tick at which the output turns off.

    Returns:
        The four register bytes, low byte first for each counter.
    """
    return _pack_counters(on_time & PWM_MASK, off_time & PWM_MASK)


def encode_full_on() -> bytes:
    """Channel block with the LEDn_ON_H full-on bit set."""
    return _pack_counters(FULL_ON_OFF_BIT, 0)


def encode_full_off() -> bytes:
    """Channel block with the LEDn_OFF_H full-off bit set.

    Full-off has precedence over full-on in the chip, so this is
    unambiguous whatever the ON registers held before.
    """
    return _pack_counters(0, FULL_ON_OFF_BIT)


def decode_channel_block(data: bytes) -> Tuple[int, int]:
    """Decode four register bytes into ``(on_time, off_time)``.

    The full-on/full-off flag (bit 12) is kept in the returned values.

    Raises:
        ValueError: If fewer than four bytes are given.
    """
    if len(data) < CHANNEL_STRIDE:
        raise ValueError(f'Channel block needs {CHANNEL_STRIDE} bytes, got {len(data)}')
    on_time = data[0] + data[1] * 256
    off_time = data[2] + data[3] * 256
    return on_time, off_time


def clamp_frequency(frequency: int) -> int:
    return max(MIN_FREQUENCY, min(MAX_FREQUENCY, int(frequency)))


def prescale_from_frequency(frequency: int, reference_clock_speed: int = INTERNAL_OSCILLATOR_HZ, offset: int = 0) -> int:
    """Compute the PRE_SCALE register value for ``frequency``.

    Integer form of ``round(osc / (4096 * freq)) - 1``. ``offset`` is added
    afterwards to trim oscillator drift, and the result is kept inside the
    range the chip accepts (3..255).

    Args:
        frequency: Target PWM frequency in Hz, already clamped by the caller.
        reference_clock_speed: Oscillator frequency in Hz.
        offset: Signed correction applied to the register value.

    Returns:
        The 8-bit register value.
    """
    divisor = PWM_RESOLUTION * frequency
    scaler = (reference_clock_speed + divisor // 2) // divisor - 1
    scaler += offset
    return max(MIN_PRE_SCALE, min(MAX_PRE_SCALE, scaler))


def frequency_from_prescale(scaler: int, reference_clock_speed: int = INTERNAL_OSCILLATOR_HZ) -> int:
    """Invert :func:`prescale_from_frequency`, rounded to the nearest Hz."""
    divisor = (scaler + 1) * PWM_RESOLUTION
    return (reference_clock_speed + divisor // 2) // divisor


def apply_bit(value: int, mask: int, enable: bool) -> int:
    """Return ``value`` with ``mask`` set or cleared."""
    if enable:
        return (value | mask) & 0xFF
    return value & ~mask & 0xFF


def encode_bus_address(address: int) -> int:
    """SUBADRx/ALLCALLADR hold the 7-bit address in bits 7:1.

    Bit 7 of ``address`` is dropped; the device handle rejects such values first.
    """
    return (address & 0x7F) << 1


def decode_bus_address(value: int) -> int:
    return (value >> 1) & 0x7F
