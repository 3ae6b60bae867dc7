"""Internal constants shared across the library."""

DEFAULT_PORT = 80

# ------------------------------------------------------------------
# Envelope (12-byte header in front of the JSON state payload)
# ------------------------------------------------------------------

ENVELOPE_MAGIC1 = 0xA5A5
ENVELOPE_MAGIC2 = 0x5A5A
ENVELOPE_CONST = 0x0B
ENVELOPE_HEADER_SIZE = 0x0C
CHECKSUM_SEED = 0xBEAF

# ------------------------------------------------------------------
# Outer command frame
# ------------------------------------------------------------------

FRAME_MAGIC = bytes.fromhex("5aa5aa555aa5aa55")
FRAME_HEADER_SIZE = 0x38
FRAME_CHECKSUM_OFFSET = 0x20
STATUS_OFFSET = 0x22
AES_BLOCK_SIZE = 16

# ------------------------------------------------------------------
# SP4 state command
# ------------------------------------------------------------------

STATE_OPCODE = 0x6A
FLAG_QUERY = 1
FLAG_APPLY = 2

DEFAULT_DEVICE_TYPE = 0x7579

# Factory key/IV used before the authentication handshake assigns a
# per-device key.
DEFAULT_KEY_HEX = "097628343fe99e23765c1513accf8b02"
DEFAULT_IV_HEX = "562e17996d093d28ddb3ba695a2e6f58"
