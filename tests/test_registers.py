import pytest

from pca9685_driver.constants import MAX_PRE_SCALE, MIN_PRE_SCALE
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


def test_channel_register_stride():
    assert channel_register(0) == 0x06
    assert channel_register(1) == 0x0A
    assert channel_register(15) == 0x42


def test_encode_channel_block_byte_order():
    assert encode_channel_block(0x123, 0xABC) == bytes([0x23, 0x01, 0xBC, 0x0A])


def test_encode_channel_block_masks_to_twelve_bits():
    # 0x1800 would set the full-off flag if it were not masked
    assert encode_channel_block(0x1001, 0x1800) == bytes([0x01, 0x00, 0x00, 0x08])
    assert decode_channel_block(encode_channel_block(5000, 0xFFFF)) == (5000 & 0xFFF, 0xFFF)


def test_full_on_and_full_off_flags():
    assert encode_full_on() == bytes([0x00, 0x10, 0x00, 0x00])
    assert encode_full_off() == bytes([0x00, 0x00, 0x00, 0x10])
    assert decode_channel_block(encode_full_on()) == (0x1000, 0)
    assert decode_channel_block(encode_full_off()) == (0, 0x1000)


def test_decode_channel_block_rejects_short_data():
    with pytest.raises(ValueError):
        decode_channel_block(b'\x00\x01\x02')


@pytest.mark.parametrize('frequency, expected', [(24, 253), (50, 121), (200, 30), (1000, 5), (1526, 3)])
def test_prescale_from_frequency_matches_datasheet(frequency, expected):
    assert prescale_from_frequency(frequency) == expected


def test_prescale_offset_and_limits():
    assert prescale_from_frequency(50, offset=-2) == 119
    assert prescale_from_frequency(50, offset=4) == 125
    assert prescale_from_frequency(1526, offset=-10) == MIN_PRE_SCALE
    assert prescale_from_frequency(24, offset=10) == MAX_PRE_SCALE


def test_prescale_with_external_clock():
    assert prescale_from_frequency(50, reference_clock_speed=50_000_000) == 243


@pytest.mark.parametrize('scaler, expected', [(3, 1526), (30, 197), (121, 50), (253, 24)])
def test_frequency_from_prescale(scaler, expected):
    assert frequency_from_prescale(scaler) == expected


def test_clamp_frequency():
    assert clamp_frequency(1) == 24
    assert clamp_frequency(24) == 24
    assert clamp_frequency(600) == 600
    assert clamp_frequency(1526) == 1526
    assert clamp_frequency(10_000) == 1526


def test_apply_bit():
    assert apply_bit(0x21, 0x08, True) == 0x29
    assert apply_bit(0x29, 0x08, False) == 0x21
    assert apply_bit(0x21, 0x01, True) == 0x21


def test_bus_address_layout():
    assert encode_bus_address(0x71) == 0xE2
    assert decode_bus_address(0xE2) == 0x71
    assert decode_bus_address(0xE0) == 0x70
    assert encode_bus_address(0xFF) == 0xFE
