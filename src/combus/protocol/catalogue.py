""" The messages exchanged with the DAS monitor, and the registry that maps
    a received type tag back to the class able to decode it.

    Command messages are sent to the monitor to query or change its rule
    configuration; the monitor answers with the corresponding response
    message. Broadcast messages are emitted by the monitor unprompted to
    describe its current state.
"""

from . import fields
from .errors import UnknownMessageType
from .facets import (
    BeamInfo,
    BeamMetrics,
    ConnectionStatus,
    ErrorMap,
    FactSet,
    PauseStatus,
    PVMap,
    RulePayload,
    RunInfo,
    RunMetrics,
    RunStatus,
    ScanStatus,
    StreamMetrics,
)
from .message import Message, SimpleMessage
from .tags import MessageType


__all__ = [
    "GetRuleDefinitions",
    "SetRuleDefinitions",
    "RestoreDefaultRuleDefinitions",
    "RuleDefinitions",
    "RuleErrors",
    "GetInputFacts",
    "InputFacts",
    "GetProcessVariables",
    "ProcessVariables",
    "ConnectionStatusMessage",
    "RunStatusMessage",
    "PauseStatusMessage",
    "ScanStatusMessage",
    "BeamInfoMessage",
    "RunInfoMessage",
    "BeamMetricsMessage",
    "RunMetricsMessage",
    "StreamMetricsMessage",
]


###############################################################################
# Commands, and the responses to them.

class GetRuleDefinitions(SimpleMessage):
    """ Request the current rule and signal configuration.
    """

    type_tag = MessageType.GET_RULES


class RestoreDefaultRuleDefinitions(SimpleMessage):
    """ Request that the default rules and signals be restored.
    """

    type_tag = MessageType.RESTORE_DEFAULT_RULES


class GetProcessVariables(SimpleMessage):
    """ Request that all currently defined process variables be emitted.
    """

    type_tag = MessageType.GET_PVS


class GetInputFacts(SimpleMessage):
    """ Request the facts available as inputs to rules.
    """

    type_tag = MessageType.GET_INPUT_FACTS


class RuleDefinitions(Message):
    """ The rules and signals currently configured. This is sent in response
        to a :class:`GetRuleDefinitions` request, and as the acknowledgement
        of a :class:`SetRuleDefinitions` request.
    """

    type_tag = MessageType.RULE_DEFINITIONS
    facets = (('definitions', RulePayload),)


class SetRuleDefinitions(Message):
    """ Replace the configured rules and signals. If *set_default* is True
        the new configuration also becomes the one restored by
        :class:`RestoreDefaultRuleDefinitions`. If any rule or signal has an
        error none of the changes are applied; it is up to the sender to
        compare what was requested against the :class:`RuleDefinitions`
        that comes back.

        The document written by this message is a superset of the one
        written by :class:`RuleDefinitions`, so that either can be read as
        the other.
    """

    type_tag = MessageType.SET_RULES
    facets = (('definitions', RulePayload),)

    def __init__(self, set_default=False, **kwargs):
        self.set_default = set_default
        Message.__init__(self, **kwargs)


    def write_fields(self, node):
        fields.BOOL.put(node, 'set_default', self.set_default)


    def read_fields(self, node):
        self.set_default = fields.BOOL.get(node, 'set_default', False)


class RuleErrors(Message):
    """ Errors found in a requested rule configuration, keyed by the fact
        or field each error refers to.
    """

    type_tag = MessageType.RULE_ERRORS
    facets = (('report', ErrorMap),)


class InputFacts(Message):
    """ Facts that can be used as inputs to rules. Facts derived from the
        configured rules are not included; facts asserted because of
        process variable or process status problems are.
    """

    type_tag = MessageType.INPUT_FACTS
    facets = (('inputs', FactSet),)


class ProcessVariables(Message):

    type_tag = MessageType.PVS
    facets = (('variables', PVMap),)


###############################################################################
# Broadcasts.

class ConnectionStatusMessage(Message):
    """ Whether the monitor is connected to the stream management service,
        and where that service is.
    """

    type_tag = MessageType.SMS_CONN_STATUS
    facets = (('status', ConnectionStatus),)


class RunStatusMessage(Message):
    """ Whether a run is being recorded, its number, and its start time.
    """

    type_tag = MessageType.RUN_STATUS
    facets = (('status', RunStatus),)


class PauseStatusMessage(Message):

    type_tag = MessageType.PAUSE_STATUS
    facets = (('status', PauseStatus),)


class ScanStatusMessage(Message):

    type_tag = MessageType.SCAN_STATUS
    facets = (('status', ScanStatus),)


class BeamInfoMessage(Message):

    type_tag = MessageType.BEAM_INFO
    facets = (('info', BeamInfo),)


class RunInfoMessage(Message):

    type_tag = MessageType.RUN_INFO
    facets = (('info', RunInfo),)


class BeamMetricsMessage(Message):

    type_tag = MessageType.BEAM_METRICS
    facets = (('metrics', BeamMetrics),)


class RunMetricsMessage(Message):

    type_tag = MessageType.RUN_METRICS
    facets = (('metrics', RunMetrics),)


class StreamMetricsMessage(Message):

    type_tag = MessageType.STREAM_METRICS
    facets = (('metrics', StreamMetrics),)


###############################################################################
# Registry.

messages = (
    GetRuleDefinitions,
    SetRuleDefinitions,
    RestoreDefaultRuleDefinitions,
    RuleDefinitions,
    RuleErrors,
    GetInputFacts,
    InputFacts,
    GetProcessVariables,
    ProcessVariables,
    ConnectionStatusMessage,
    RunStatusMessage,
    PauseStatusMessage,
    ScanStatusMessage,
    BeamInfoMessage,
    RunInfoMessage,
    BeamMetricsMessage,
    RunMetricsMessage,
    StreamMetricsMessage,
)


def build(classes):
    """ Return a dictionary mapping each type tag to its message class.
        Two classes claiming the same tag is a programming error, and is
        rejected here rather than discovered when a message goes astray.
    """

    registry = dict()

    for message in classes:
        tag = int(message.type_tag)

        try:
            existing = registry[tag]
        except KeyError:
            registry[tag] = message
        else:
            raise ValueError('type tag 0x%04x claimed by both %s and %s' % (tag, existing.__name__, message.__name__))

    return registry


registry = build(messages)


def lookup(tag):
    """ Return the message class registered for *tag*. Raises
        :class:`~combus.protocol.errors.UnknownMessageType` if there is
        none.
    """

    try:
        return registry[int(tag)]
    except (KeyError, TypeError, ValueError):
        raise UnknownMessageType(tag) from None


def decode(tag, node):
    """ Decode the document *node* as the message identified by *tag*.
    """

    return lookup(tag).decode(node)


def try_decode(tag, node):
    return lookup(tag).try_decode(node)


def tags():
    return tuple(registry.keys())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
