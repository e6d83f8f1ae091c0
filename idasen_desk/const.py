"""
Linak / IKEA Idåsen protocol constants.

Protocol reverse-engineered from:
- https://github.com/anson-vandoren/linak-desk-spec
- https://github.com/j5lien/esphome-idasen-desk-controller
"""

# === LINAK BLE UUIDS ===
UUID_MOVE = "99fa0002-338a-1024-8a49-009c0215f78a"
UUID_HEIGHT = "99fa0021-338a-1024-8a49-009c0215f78a"
UUID_REFERENCE_INPUT = "99fa0031-338a-1024-8a49-009c0215f78a"

# === COMMANDS ===
CMD_WAKEUP = bytes([0xFE, 0x00])
CMD_STOP = bytes([0xFF, 0x00])

# Advertised local name prefix
DESK_NAME_PREFIX = "Desk"

# === HEIGHT RANGE ===
MIN_HEIGHT_M = 0.62
MAX_HEIGHT_M = 1.27
MIN_HEIGHT_MM = 620
MAX_HEIGHT_MM = 1270

# Raw position/speed units per meter
RAW_UNITS_PER_METER = 10000

# Manual step size for up/down nudges
HEIGHT_STEP_MM = 10.0

# === MOTION ===
# Below this the desk is already where it was asked to go
ALREADY_AT_TARGET_M = 0.002
ARRIVAL_TOLERANCE_M = 0.003
MOVE_TIMEOUT = 20.0  # seconds
MOVE_POLL_INTERVAL = 0.2  # seconds

# === CONNECTION ===
DEFAULT_SCAN_TIMEOUT = 10.0  # seconds
DEFAULT_CONNECT_TIMEOUT = 30.0  # seconds
