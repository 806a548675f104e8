import pytest

from pca9685_driver.constants import ALL_LED_OFF_H, LED0_ON_L, MODE1, MODE2
from pca9685_driver.device import PCA9685
from pca9685_driver.errors import ErrorCode, PCA9685Error


def test_constructor_does_not_touch_the_bus(bus):
    PCA9685(0x40, bus)
    assert bus.transactions == 0
    assert not bus.begun


def test_constructor_rejects_bad_channel_count(bus):
    with pytest.raises(ValueError):
        PCA9685(0x40, bus, channel_count=0)
    with pytest.raises(ValueError):
        PCA9685(0x40, bus, channel_count=17)


def test_begin_configures_mode_registers(bus):
    pca = PCA9685(0x40, bus)
    assert pca.begin()
    assert bus.begun
    assert bus.writes[0] == (0x40, b'')
    assert bus.registers[MODE1] == 0x21
    assert bus.registers[MODE2] == 0x04
    assert pca.last_error() == ErrorCode.OK


def test_begin_without_device_fails_quietly(bus):
    bus.nack = True
    pca = PCA9685(0x40, bus)
    assert pca.begin() is False
    assert bus.data_writes() == []
    assert pca.last_error() == ErrorCode.I2C


def test_is_connected(bus):
    assert PCA9685(0x40, bus).is_connected()
    other = PCA9685(0x41, bus)
    assert not other.is_connected()
    assert other.last_error() == ErrorCode.I2C


def test_configure_writes_both_registers_unconditionally(pca, bus):
    assert pca.configure(0x21, 0x04).ok
    assert bus.data_writes() == [bytes([MODE1, 0x21]), bytes([MODE2, 0x04])]


def test_set_pwm_is_one_five_byte_write(pca, bus):
    assert pca.set_pwm(3, 0x100, 0x7FF).ok
    assert bus.writes == [(0x40, bytes([LED0_ON_L + 12, 0x00, 0x01, 0xFF, 0x07]))]


@pytest.mark.parametrize('channel', [0, 7, 15])
@pytest.mark.parametrize('on_time, off_time', [(0, 0), (0, 4095), (1024, 3072), (4095, 1), (5000, 0x1FFF)])
def test_set_then_get_pwm_round_trip(pca, channel, on_time, off_time):
    assert pca.set_pwm(channel, on_time, off_time).ok
    assert pca.get_pwm(channel).value == (on_time & 0xFFF, off_time & 0xFFF)


def test_set_pwm_short_form_starts_at_zero(pca):
    assert pca.set_pwm(2, 1500).ok
    assert pca.get_pwm(2).value == (0, 1500)


def test_get_pwm_write_then_read(pca, bus):
    pca.get_pwm(1)
    assert bus.writes == [(0x40, bytes([0x0A]))]
    assert bus.reads == [(0x40, 4)]


@pytest.mark.parametrize('channel', [16, 17, 255, -1])
def test_invalid_channel_performs_no_io(pca, bus, channel):
    assert pca.set_pwm(channel, 0, 100).error == ErrorCode.CHANNEL
    assert pca.last_error() == ErrorCode.CHANNEL
    assert pca.get_pwm(channel).error == ErrorCode.CHANNEL
    assert pca.last_error() == ErrorCode.CHANNEL
    assert pca.digital_write(channel, 1).error == ErrorCode.CHANNEL
    assert pca.last_error() == ErrorCode.CHANNEL
    assert bus.transactions == 0


def test_channel_count_bounds_operations(bus):
    pca = PCA9685(0x40, bus, channel_count=8)
    assert pca.set_pwm(7, 0, 10).ok
    assert pca.set_pwm(8, 0, 10).error == ErrorCode.CHANNEL
    assert len(bus.writes) == 1


def test_short_read_leaves_values_untouched(pca, bus):
    pca.set_pwm(4, 100, 200)
    bus.short_read = 3
    on_time, off_time = 7, 9
    result = pca.get_pwm(4)
    on_time, off_time = result.value_or((on_time, off_time))
    assert (on_time, off_time) == (7, 9)
    assert result.value is None
    assert pca.last_error() == ErrorCode.I2C
    with pytest.raises(PCA9685Error):
        result.unwrap()


def test_digital_write_uses_full_on_and_full_off_flags(pca, bus):
    assert pca.digital_write(5, True).ok
    assert bus.registers[0x1A:0x1E] == bytes([0x00, 0x10, 0x00, 0x00])
    assert pca.get_pwm(5).value == (0x1000, 0)

    assert pca.digital_write(5, 0).ok
    assert bus.registers[0x1A:0x1E] == bytes([0x00, 0x00, 0x00, 0x10])
    assert pca.get_pwm(5).value == (0, 0x1000)


def test_all_off_is_a_single_register_write(pca, bus):
    pca.set_pwm(0, 0, 2048)
    bus.writes.clear()
    assert pca.all_off().ok
    assert bus.writes == [(0x40, bytes([ALL_LED_OFF_H, 0x10]))]
    assert pca.get_pwm(0).value == (0, 2048)


def test_set_pwm_all_is_one_transaction(pca, bus):
    values = [(channel * 10, channel * 100 + 5) for channel in range(16)]
    assert pca.set_pwm_all(values).ok
    assert len(bus.writes) == 1
    assert len(bus.writes[0][1]) == 1 + 16 * 4
    assert pca.get_pwm(15).value == (150, 1505)


def test_set_pwm_all_requires_every_channel(pca, bus):
    with pytest.raises(ValueError):
        pca.set_pwm_all([(0, 0)] * 15)
    assert bus.transactions == 0


def test_transport_failure_is_reported(pca, bus):
    bus.nack = True
    assert pca.set_pwm(0, 0, 1).error == ErrorCode.I2C
    assert pca.last_error() == ErrorCode.I2C
    assert pca.last_error() == ErrorCode.OK


def test_context_manager_closes_transport(bus):
    with PCA9685(0x40, bus) as pca:
        pca.begin()
    assert bus.closed
