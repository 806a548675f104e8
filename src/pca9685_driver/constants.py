"""
Register map and numeric constants of the PCA9685 (NXP datasheet rev. 4).
"""

### Registers ###
MODE1 = 0x00
MODE2 = 0x01
SUBADR1 = 0x02
SUBADR2 = 0x03
SUBADR3 = 0x04
ALLCALLADR = 0x05
LED0_ON_L = 0x06
ALL_LED_ON_L = 0xFA
ALL_LED_ON_H = 0xFB
ALL_LED_OFF_L = 0xFC
ALL_LED_OFF_H = 0xFD
PRE_SCALE = 0xFE
TESTMODE = 0xFF

MODE_REGISTERS = (MODE1, MODE2)

# Each channel owns ON_L, ON_H, OFF_L, OFF_H
CHANNEL_STRIDE = 4

### MODE1 bits ###
MODE1_RESTART = 0x80
MODE1_EXTCLK = 0x40
MODE1_AUTOINCR = 0x20
MODE1_SLEEP = 0x10
MODE1_SUB1 = 0x08
MODE1_SUB2 = 0x04
MODE1_SUB3 = 0x02
MODE1_ALLCALL = 0x01

SUB_CALL_BITS = {
    1: MODE1_SUB1,
    2: MODE1_SUB2,
    3: MODE1_SUB3,
}
SUB_CALL_REGISTERS = {
    1: SUBADR1,
    2: SUBADR2,
    3: SUBADR3,
}

### MODE2 bits ###
MODE2_INVERT = 0x10
MODE2_OCH = 0x08  # outputs change on ACK instead of STOP
MODE2_OUTDRV = 0x04  # totem pole instead of open drain
MODE2_OUTNE = 0x03

DEFAULT_MODE1 = MODE1_AUTOINCR | MODE1_ALLCALL
DEFAULT_MODE2 = MODE2_OUTDRV

### PWM counters ###
PWM_RESOLUTION = 4096
PWM_MASK = 0x0FFF
FULL_ON_OFF_BIT = 0x1000
ALL_LED_FULL_OFF = 0x10

### Frequency ###
INTERNAL_OSCILLATOR_HZ = 25_000_000
MIN_FREQUENCY = 24
MAX_FREQUENCY = 1526
MIN_PRE_SCALE = 0x03
MAX_PRE_SCALE = 0xFF
POWER_ON_FREQUENCY = 200

# Oscillator start-up time after SLEEP is cleared, in seconds
OSCILLATOR_SETTLE_TIME = 0.0005

### Device ###
DEFAULT_ADDRESS = 0x40
MAX_CHANNELS = 16
DEFAULT_I2C_BUS = 1
DEFAULT_I2C_FREQUENCY = 400_000
