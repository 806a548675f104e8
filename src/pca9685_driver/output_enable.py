"""
Output enable (OE) pin control.

The PCA9685 OE input is active low: pulling it high tristates (or forces
low, depending on MODE2.OUTNE) every output at once, independent of the
register contents. This makes it the hardware kill switch for servos.
"""

import time

from pca9685_driver import labels
from pca9685_driver.logger import Logger

log = Logger().setup_logger('Output enable')


class OutputEnablePin:
    """Drives the OE pin through RPi.GPIO (BCM numbering).

    The pin starts high, outputs disabled, until :meth:`enable` is called.

    Args:
        gpio_port: BCM number of the GPIO wired to OE.
        gpio: GPIO module to use; defaults to ``RPi.GPIO``, imported on setup.
    """

    def __init__(self, gpio_port: int, gpio=None):
        self.gpio_port = gpio_port
        self._gpio = gpio

    def setup(self, max_retries: int = 10, retry_delay: float = 2.0) -> None:
        """Configure the pin as an output.

        When running as a systemd service the GPIO device may not be
        accessible yet at boot, so the setup is retried.
        """
        if self._gpio is None:
            import RPi.GPIO as GPIO  # type: ignore

            self._gpio = GPIO

        for attempt in range(1, max_retries + 1):
            try:
                log.info(labels.OE_ATTEMPTING_GPIO, self.gpio_port)
                self._gpio.setmode(self._gpio.BCM)
                self._gpio.setup(self.gpio_port, self._gpio.OUT, initial=self._gpio.HIGH)
                log.info(labels.OE_GPIO_SUCCESS)
                return
            except Exception as e:
                if attempt == max_retries:
                    log.error(labels.OE_GPIO_ERROR)
                    raise
                log.warning(labels.OE_GPIO_WARNING, e)
                time.sleep(retry_delay)

    def _require_gpio(self):
        if self._gpio is None:
            raise RuntimeError('Output enable pin not set up, call setup() first')
        return self._gpio

    def enable(self) -> None:
        gpio = self._require_gpio()
        gpio.output(self.gpio_port, gpio.LOW)

    def disable(self) -> None:
        gpio = self._require_gpio()
        gpio.output(self.gpio_port, gpio.HIGH)

    def is_enabled(self) -> bool:
        gpio = self._require_gpio()
        return gpio.input(self.gpio_port) == gpio.LOW

    def cleanup(self) -> None:
        if self._gpio is not None:
            self._gpio.cleanup(self.gpio_port)
