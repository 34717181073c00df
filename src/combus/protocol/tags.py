"""Message type tags.

Keep these in one place; a tag identifies a wire shape, so a value must
never be reused for a different message.
"""

import enum


class MessageType(enum.IntEnum):

    # Commands and their responses
    GET_RULES = 0x0300
    SET_RULES = 0x0301
    RESTORE_DEFAULT_RULES = 0x0302
    RULE_DEFINITIONS = 0x0303
    RULE_ERRORS = 0x0304
    GET_INPUT_FACTS = 0x0305
    INPUT_FACTS = 0x0306
    GET_PVS = 0x0307
    PVS = 0x0308

    # Status and metrics broadcasts
    SMS_CONN_STATUS = 0x0310
    RUN_STATUS = 0x0311
    PAUSE_STATUS = 0x0312
    SCAN_STATUS = 0x0313
    BEAM_INFO = 0x0314
    RUN_INFO = 0x0315
    BEAM_METRICS = 0x0316
    RUN_METRICS = 0x0317
    STREAM_METRICS = 0x0318
