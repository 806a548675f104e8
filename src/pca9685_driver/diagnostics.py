#!/usr/bin/env python3
"""
Hardware check for a PCA9685 board.

Connects to the chip described by the configuration file (or the command
line), dumps the mode registers, frequency and every channel, and can sweep
one channel from 0 to 100% duty and back.

Usage: python -m pca9685_driver.diagnostics [--address 0x40] [--sweep 0]
"""

import argparse
import sys
import time
from pathlib import Path

from pca9685_driver import labels
from pca9685_driver.config import Config
from pca9685_driver.constants import MODE1, MODE2, PWM_RESOLUTION
from pca9685_driver.device import PCA9685
from pca9685_driver.factory import PCA9685Factory

SWEEP_STEP = 64
SWEEP_DELAY = 0.01


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='PCA9685 diagnostics')
    parser.add_argument('--config', type=Path, help='JSON configuration file')
    parser.add_argument('--address', type=lambda value: int(value, 0), help='I2C address, overrides the configuration')
    parser.add_argument('--sweep', type=int, metavar='CHANNEL', help='sweep one channel through its duty range')
    return parser.parse_args(argv)


def dump(pca9685: PCA9685, requested_frequency: int) -> None:
    for number, register in ((1, MODE1), (2, MODE2)):
        print(labels.DIAG_MODE.format(number, pca9685.read_mode(register).value_or(0)))
    print(labels.DIAG_FREQUENCY.format(pca9685.get_frequency(use_cache=False).value_or(0), requested_frequency))
    for channel in range(pca9685.channel_count):
        result = pca9685.get_pwm(channel)
        if result.ok:
            print(labels.DIAG_CHANNEL.format(channel, *result.value))
        else:
            print(labels.DIAG_CHANNEL_ERROR.format(channel, result.error.name))


def sweep(pca9685: PCA9685, channel: int) -> None:
    print(labels.DIAG_SWEEP.format(channel))
    duty_range = list(range(0, PWM_RESOLUTION, SWEEP_STEP))
    for off_time in duty_range + duty_range[::-1]:
        pca9685.set_pwm(channel, 0, off_time)
        time.sleep(SWEEP_DELAY)
    pca9685.digital_write(channel, 0)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = Config(args.config)
    if args.address is not None:
        config.pca9685.to_dict()['address'] = args.address

    print(labels.DIAG_TITLE)
    pca9685 = PCA9685Factory.create(config, begin=False)
    with pca9685:
        pca9685.transport.begin()
        if not pca9685.is_connected():
            print(labels.DIAG_NOT_CONNECTED.format(pca9685.address))
            return 1
        print(labels.DIAG_CONNECTED.format(pca9685.address))

        dump(pca9685, config.get_frequency())
        if args.sweep is not None:
            # a freshly powered chip sleeps with auto-increment off
            pca9685.configure(config.get_mode1(), config.get_mode2())
            pca9685.set_frequency(config.get_frequency(), config.get_frequency_offset())
            pca9685.set_output_enable(True)
            sweep(pca9685, args.sweep)
        print(labels.DIAG_DONE.format(pca9685.last_error().name))
    return 0


if __name__ == '__main__':
    sys.exit(main())
