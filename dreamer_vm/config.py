"""
Dreamer VM — Machine Geometry + Logging Defaults

Everything here is a plain module constant. Change the value here and
every module that imports it picks it up; there is no config file.
"""

from pathlib import Path


# =============================================================================
#  WORD GEOMETRY
# =============================================================================
WORD_BITS = 64
WORD_BYTES = WORD_BITS // 8      # 8 payload bytes after the SET opcode
WORD_MASK = (1 << WORD_BITS) - 1

# =============================================================================
#  STACK
# =============================================================================
MAX_STACK_DEPTH = 65535

# =============================================================================
#  ENCODING
# =============================================================================
SET_OPCODE = 0x06                # only opcode that carries a payload
SET_SIZE = 1 + WORD_BYTES

# =============================================================================
#  LOGGING
# =============================================================================
LOG_NAME = "dreamer_vm"
LOG_DIR = Path.cwd() / "logs"
LOG_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "DEBUG"
DEFAULT_CONSOLE_LEVEL = "WARNING"
