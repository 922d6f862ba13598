"""Encode command requests and reports into wire text.

Two syntaxes are supported:

* JSON: one canonical JSON object whose first member is "class",
  e.g. {"class":"WATCH","enable":true,"json":true}.
* GPSD: the daemon's native request syntax, e.g.
  ?WATCH={"enable":true,"json":true}; or ?POLL;

Only fields the caller set are written; None fields are left out and no
field is ever written as null. Output never contains a line terminator;
the session appends it.

encode_report() writes report messages back in the daemon's own JSON
form, e.g. for replaying or relaying a captured stream.
"""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any

from .commands import (
    CommandRequest,
    DeviceCommand,
    DevicesCommand,
    PollCommand,
    RawCommand,
    VersionCommand,
    WatchCommand,
)
from .messages import (
    Mode,
    Pps,
    ProtocolMessage,
    Satellite,
    Sky,
    Tpv,
    Unknown,
    class_name,
)

_COMMAND_CLASSES: dict[type[Any], str] = {
    WatchCommand: "WATCH",
    PollCommand: "POLL",
    VersionCommand: "VERSION",
    DevicesCommand: "DEVICES",
    DeviceCommand: "DEVICE",
}


class CommandStyle(Enum):
    """Wire syntax used for outgoing commands."""

    JSON = "json"
    GPSD = "gpsd"


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _set_fields(cmd: CommandRequest) -> dict[str, Any]:
    """Fields the caller set, in declaration order."""
    return {
        f.name: getattr(cmd, f.name)
        for f in dataclasses.fields(cmd)
        if getattr(cmd, f.name) is not None
    }


def _class_token(cmd: CommandRequest) -> str:
    try:
        return _COMMAND_CLASSES[type(cmd)]
    except KeyError:
        raise TypeError(f"Not a command request: {type(cmd).__name__}") from None


def encode(cmd: CommandRequest) -> str:
    """Encode a command as canonical JSON text.

    RawCommand text is returned verbatim.
    """
    if isinstance(cmd, RawCommand):
        return cmd.text
    payload: dict[str, Any] = {"class": _class_token(cmd)}
    payload.update(_set_fields(cmd))
    return _dumps(payload)


def encode_gpsd(cmd: CommandRequest) -> str:
    """Encode a command in gpsd's native ?CLASS={...}; syntax.

    Commands without set fields use the bare form (?POLL;). WATCH always
    carries a body because a bare ?WATCH; only queries the policy.
    """
    if isinstance(cmd, RawCommand):
        return cmd.text
    token = _class_token(cmd)
    fields = _set_fields(cmd)
    if not fields and not isinstance(cmd, WatchCommand):
        return f"?{token};"
    return f"?{token}={_dumps(fields)};"


def format_command(cmd: CommandRequest, style: CommandStyle = CommandStyle.JSON) -> str:
    """Encode a command in the requested syntax."""
    if style is CommandStyle.GPSD:
        return encode_gpsd(cmd)
    return encode(cmd)


# -----------------------------------------------------------------------------
# Reports
# -----------------------------------------------------------------------------

# Python attribute name -> wire name, where they differ.
_WIRE_NAMES: dict[type[Any], dict[str, str]] = {
    Tpv: {"alt_msl": "altMSL", "alt_hae": "altHAE", "geoid_sep": "geoidSep"},
    Satellite: {
        "prn": "PRN",
        "elevation": "el",
        "azimuth": "az",
        "signal_strength": "ss",
    },
    Sky: {"n_sat": "nSat", "u_sat": "uSat"},
    Pps: {"qerr": "qErr"},
}


def _report_fields(message: Any) -> dict[str, Any]:
    renames = _WIRE_NAMES.get(type(message), {})
    payload: dict[str, Any] = {}
    for f in dataclasses.fields(message):
        value = getattr(message, f.name)
        if value is None:
            continue
        if isinstance(value, Mode):
            value = int(value)
        elif isinstance(value, tuple):
            value = [_report_object(item) for item in value]
        payload[renames.get(f.name, f.name)] = value
    return payload


def _report_object(message: Any) -> dict[str, Any]:
    # Satellites are the only nested objects gpsd sends without a class.
    if isinstance(message, Satellite):
        return _report_fields(message)
    payload: dict[str, Any] = {"class": class_name(message)}
    payload.update(_report_fields(message))
    return payload


def encode_report(message: ProtocolMessage) -> str:
    """Encode a report as the daemon would send it.

    "class" comes first and unset fields are omitted. Mode is written as
    its wire number. Unknown reports are written from their payload.

    Raises:
        KeyError: message is not a report type.
    """
    if isinstance(message, Unknown):
        return _dumps(message.payload)
    return _dumps(_report_object(message))
