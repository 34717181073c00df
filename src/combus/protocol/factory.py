"""Convenience constructors for responses to command messages."""

from __future__ import annotations

from typing import Mapping, Optional

from .catalogue import RuleDefinitions, RuleErrors, SetRuleDefinitions
from .facets import ErrorMap, RulePayload


def acknowledge(request: SetRuleDefinitions, current: Optional[RulePayload] = None) -> RuleDefinitions:
    """Build the :class:`RuleDefinitions` answering a set request.

    The response describes the configuration now in effect: *current* if
    given (a rejected request leaves the previous configuration in place),
    otherwise the rules and signals of the request itself. The response
    owns a copy; later changes to either message do not affect the other.
    """

    if current is None:
        current = request.definitions

    return RuleDefinitions(definitions=current)


def reject(errors: Mapping[str, str]) -> RuleErrors:
    """Build the :class:`RuleErrors` describing why a set request was not
    applied."""

    return RuleErrors(report=ErrorMap(dict(errors)))
