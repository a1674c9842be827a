"""Directive keys, defaults and reserved names for configuration specs.

Every directive lives under :data:`DIRECTIVE_PREFIX` and is stripped from the
parameter set before generation. Update here to change project-wide names.
"""

DIRECTIVE_PREFIX = "confspace."

SEPARATOR_KEY = DIRECTIVE_PREFIX + "valuesSeparator"
REPETITIONS_KEY = DIRECTIVE_PREFIX + "repetitions"
GROUP_BY_KEY = DIRECTIVE_PREFIX + "groupConfsBy"
PACKETS_KEY = DIRECTIVE_PREFIX + "packets"
CONDITIONS_KEY = DIRECTIVE_PREFIX + "generateParametersValuesCondition"
BINDINGS_KEY = DIRECTIVE_PREFIX + "boundParameters"

DIRECTIVE_KEYS = (
    SEPARATOR_KEY,
    REPETITIONS_KEY,
    GROUP_BY_KEY,
    PACKETS_KEY,
    CONDITIONS_KEY,
    BINDINGS_KEY,
)

DEFAULT_SEPARATOR = ";"
DEFAULT_REPETITIONS = 1

# Packet owning every configuration when the spec declares no packets.
DEFAULT_PACKET_NAME = "NO_PACKET"
PACKET_SEPARATOR = "."

# Separators inside directive values
LIST_SEPARATOR = ","
LIST_OPENING = "{"
LIST_CLOSING = "}"
CONDITION_SEPARATOR = ":"
BINDING_SEPARATOR = ":"
ASSIGNMENT = "="

# Column used for the packet name when rows are exported
PACKET_COLUMN = DIRECTIVE_PREFIX + "packet"
