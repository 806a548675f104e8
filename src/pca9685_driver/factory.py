"""Builds a ready-to-use PCA9685 from the JSON configuration."""

from typing import Optional

from pca9685_driver.config import Config
from pca9685_driver.device import PCA9685
from pca9685_driver.logger import Logger
from pca9685_driver.output_enable import OutputEnablePin
from pca9685_driver.transport import BusioTransport, BusTransport, SMBusTransport

log = Logger().setup_logger('Factory')


class PCA9685Factory:
    """Factory for creating PCA9685 handles with proper initialization."""

    @staticmethod
    def create_transport(config: Config) -> BusTransport:
        if config.get_transport() == 'busio':
            return BusioTransport(frequency=config.get_i2c_frequency())
        return SMBusTransport(bus=config.get_bus())

    @staticmethod
    def create(
        config: Optional[Config] = None,
        transport: Optional[BusTransport] = None,
        output_enable: Optional[OutputEnablePin] = None,
        begin: bool = True,
    ) -> PCA9685:
        """Create a PCA9685 handle and, by default, start it.

        Args:
            config: Configuration to use; the global ``Config()`` when omitted.
            transport: Bus to use instead of the configured one, e.g. one
                shared with other chips.
            output_enable: OE pin to use instead of the configured GPIO.
            begin: Start the chip, write the configured modes and frequency.

        Returns:
            The PCA9685 handle.

        Raises:
            RuntimeError: If the chip does not answer or can not be configured.
        """
        config = config if config is not None else Config()
        transport = transport if transport is not None else PCA9685Factory.create_transport(config)

        if output_enable is None and config.get_output_enable_gpio() is not None:
            output_enable = OutputEnablePin(config.get_output_enable_gpio())
            output_enable.setup()

        pca9685 = PCA9685(
            config.get_address(),
            transport,
            channel_count=config.get_channel_count(),
            reference_clock_speed=config.get_reference_clock_speed(),
            output_enable=output_enable,
        )
        if not begin:
            return pca9685

        if not pca9685.begin(config.get_mode1(), config.get_mode2()):
            raise RuntimeError(f'PCA9685 at 0x{pca9685.address:02X} failed to initialize')
        result = pca9685.set_frequency(config.get_frequency(), config.get_frequency_offset())
        if not result.ok:
            raise RuntimeError(f'PCA9685 at 0x{pca9685.address:02X} rejected frequency: {result.error.name}')
        log.info('PCA9685 board activated')
        return pca9685
