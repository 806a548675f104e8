"""
Log and error message strings used across the driver.

Keeping them here keeps the wording consistent between modules.
"""

# Device lifecycle
DEVICE_BEGIN = "Starting PCA9685 at 0x%02X"
DEVICE_NOT_FOUND = "No PCA9685 acknowledged at 0x%02X"
DEVICE_CONFIGURED = "PCA9685 at 0x%02X configured (MODE1=0x%02X MODE2=0x%02X)"
DEVICE_CLOSED = "PCA9685 at 0x%02X closed"

# Validation
ERR_CHANNEL_OUT_OF_RANGE = "Channel %d out of range (0..%d)"
ERR_MODE_REGISTER = "Register 0x%02X is not a mode register"
ERR_SUB_CALL_NUMBER = "Sub-call number %d out of range (1..3)"
ERR_BUS_ADDRESS = "Address 0x%X is not a 7-bit I2C address"
ERR_CHANNEL_COUNT = "channel_count must be within 1..{max_channels}, got {channel_count}"
ERR_CHANNEL_VALUES = "Expected {expected} (on, off) pairs, got {actual}"
PWM_VALUE_MASKED = "Channel %d: (%d, %d) masked to 12 bits as (%d, %d)"

# Transport
ERR_TRANSPORT_NOT_STARTED = "Bus transport not started, call begin() first"
TRANSPORT_OPENED = "Opened I2C bus %s"
TRANSPORT_WRITE_FAILED = "Write of %d byte(s) to 0x%02X failed: %s"
TRANSPORT_READ_FAILED = "Read of %d byte(s) from 0x%02X failed: %s"
TRANSPORT_SHORT_READ = "Read from 0x%02X returned %d of %d byte(s)"
TRANSACTION_FAILED = "Register 0x%02X: transaction failed with status %d"

# Frequency
FREQUENCY_CLAMPED = "Frequency %d Hz clamped to %d Hz"
FREQUENCY_SET = "Frequency set to %d Hz (PRE_SCALE=%d)"
FREQUENCY_RESTORE_FAILED = "Could not restore MODE1=0x%02X after PRE_SCALE write"

# Output enable
OE_ATTEMPTING_GPIO = "Attempting to configure output enable GPIO %d"
OE_GPIO_SUCCESS = "Output enable GPIO configured successfully."
OE_GPIO_WARNING = "Could not access the GPIO pins (%s). Will retry."
OE_GPIO_ERROR = "Unable to access GPIO pins to configure output enable."

# Configuration
CONFIG_LOADED = "Configuration loaded from %s"
CONFIG_DEFAULTS = "No configuration file at %s, using defaults"
ERR_CONFIG_INVALID_JSON = "Configuration file {path} is not valid JSON: {error}"
ERR_CONFIG_UNKNOWN_TRANSPORT = "Unknown transport '{transport}', expected one of {choices}"
ERR_CONFIG_NOT_OBJECT = "Configuration {what} in {path} must be a JSON object, got {kind}"

# Diagnostics
DIAG_TITLE = "=== PCA9685 diagnostics ==="
DIAG_NOT_CONNECTED = "[ERROR] PCA9685 not found at 0x{:02X}"
DIAG_CONNECTED = "PCA9685 found at 0x{:02X}"
DIAG_MODE = "MODE{}: 0x{:02X}"
DIAG_FREQUENCY = "Frequency: {} Hz (requested {} Hz)"
DIAG_CHANNEL = "  CH{:02d}: on={:4d} off={:4d}"
DIAG_CHANNEL_ERROR = "  CH{:02d}: read failed ({})"
DIAG_SWEEP = "Sweeping channel {}..."
DIAG_DONE = "Diagnostics finished, last error: {}"
