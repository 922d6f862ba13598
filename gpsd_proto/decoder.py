"""Decode gpsd JSON frames into report messages.

Dispatch is a closed table from the "class" token to a decode function.
Classes missing from the table raise UnknownClassError, which callers may
treat as recoverable.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from .errors import (
    FieldError,
    MalformedJsonError,
    MissingDiscriminatorError,
    UnknownClassError,
)
from .messages import (
    Att,
    Device,
    Devices,
    Error,
    Gst,
    Mode,
    Poll,
    Pps,
    ProtocolMessage,
    Satellite,
    Sky,
    Timestamp,
    Toff,
    Tpv,
    Unknown,
    Version,
    Watch,
)

_LOGGER = logging.getLogger(__name__)

DISCRIMINATOR = "class"

_MISSING = object()


class _Fields:
    """Typed accessors over one JSON object of a frame.

    Every accessor raises FieldError naming the class and the field path.
    Optional accessors map an absent key, or an explicit null, to None.
    """

    def __init__(
        self, obj: dict[str, Any], raw: str, class_name: str, prefix: str = ""
    ) -> None:
        self._obj = obj
        self._raw = raw
        self._class_name = class_name
        self._prefix = prefix

    def child(self, obj: Any, path: str) -> _Fields:
        if not isinstance(obj, dict):
            raise self._error(path, "expected an object")
        return _Fields(obj, self._raw, self._class_name, self._qualify(path))

    def _qualify(self, key: str) -> str:
        return f"{self._prefix}.{key}" if self._prefix else key

    def _error(self, key: str, reason: str) -> FieldError:
        return FieldError(self._raw, self._class_name, self._qualify(key), reason)

    def _get(self, key: str, required: bool) -> Any:
        value = self._obj.get(key, _MISSING)
        if value is _MISSING or value is None:
            if required:
                raise self._error(key, "required field is missing")
            return _MISSING
        return value

    def string(self, key: str, *, required: bool = False) -> str | None:
        value = self._get(key, required)
        if value is _MISSING:
            return None
        if not isinstance(value, str):
            raise self._error(key, f"expected a string, got {_json_type(value)}")
        return value

    def integer(self, key: str, *, required: bool = False) -> int | None:
        value = self._get(key, required)
        if value is _MISSING:
            return None
        # bool is a subclass of int but never a valid number on the wire
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._error(key, f"expected an integer, got {_json_type(value)}")
        return value

    def number(self, key: str, *, required: bool = False) -> float | None:
        value = self._get(key, required)
        if value is _MISSING:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._error(key, f"expected a number, got {_json_type(value)}")
        return value

    def boolean(self, key: str, *, required: bool = False) -> bool | None:
        value = self._get(key, required)
        if value is _MISSING:
            return None
        if not isinstance(value, bool):
            raise self._error(key, f"expected a boolean, got {_json_type(value)}")
        return value

    def timestamp(self, key: str) -> Timestamp | None:
        """ISO-8601 string, or epoch seconds as sent by pre-3.10 daemons."""
        value = self._get(key, False)
        if value is _MISSING:
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._error(
                key, f"expected a timestamp string or number, got {_json_type(value)}"
            )
        return value

    def objects(self, key: str, *, required: bool = False) -> list[_Fields]:
        value = self._get(key, required)
        if value is _MISSING:
            return []
        if not isinstance(value, list):
            raise self._error(key, f"expected an array, got {_json_type(value)}")
        return [self.child(item, f"{key}[{idx}]") for idx, item in enumerate(value)]


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


# -----------------------------------------------------------------------------
# Per-class decoders
# -----------------------------------------------------------------------------


def _decode_version(f: _Fields) -> Version:
    return Version(
        release=f.string("release", required=True),
        rev=f.string("rev", required=True),
        proto_major=f.integer("proto_major", required=True),
        proto_minor=f.integer("proto_minor", required=True),
        remote=f.string("remote"),
    )


def _decode_tpv(f: _Fields) -> Tpv:
    return Tpv(
        mode=Mode.from_wire(f.integer("mode", required=True)),
        device=f.string("device"),
        status=f.integer("status"),
        time=f.timestamp("time"),
        ept=f.number("ept"),
        leapseconds=f.integer("leapseconds"),
        alt_msl=f.number("altMSL"),
        alt_hae=f.number("altHAE"),
        geoid_sep=f.number("geoidSep"),
        lat=f.number("lat"),
        lon=f.number("lon"),
        alt=f.number("alt"),
        epx=f.number("epx"),
        epy=f.number("epy"),
        epv=f.number("epv"),
        track=f.number("track"),
        speed=f.number("speed"),
        climb=f.number("climb"),
        epd=f.number("epd"),
        eps=f.number("eps"),
        epc=f.number("epc"),
        eph=f.number("eph"),
    )


def _decode_satellite(f: _Fields) -> Satellite:
    return Satellite(
        prn=f.integer("PRN", required=True),
        used=f.boolean("used", required=True),
        elevation=f.number("el"),
        azimuth=f.number("az"),
        signal_strength=f.number("ss"),
        gnssid=f.integer("gnssid"),
        svid=f.integer("svid"),
        health=f.integer("health"),
    )


def _decode_sky(f: _Fields) -> Sky:
    return Sky(
        satellites=tuple(_decode_satellite(s) for s in f.objects("satellites")),
        device=f.string("device"),
        time=f.timestamp("time"),
        xdop=f.number("xdop"),
        ydop=f.number("ydop"),
        vdop=f.number("vdop"),
        tdop=f.number("tdop"),
        hdop=f.number("hdop"),
        gdop=f.number("gdop"),
        pdop=f.number("pdop"),
        n_sat=f.integer("nSat"),
        u_sat=f.integer("uSat"),
    )


def _decode_device(f: _Fields) -> Device:
    return Device(
        path=f.string("path"),
        activated=f.timestamp("activated"),
        flags=f.integer("flags"),
        driver=f.string("driver"),
        subtype=f.string("subtype"),
        bps=f.integer("bps"),
        parity=f.string("parity"),
        stopbits=f.integer("stopbits"),
        native=f.integer("native"),
        cycle=f.number("cycle"),
        mincycle=f.number("mincycle"),
    )


def _decode_devices(f: _Fields) -> Devices:
    return Devices(
        devices=tuple(_decode_device(d) for d in f.objects("devices", required=True)),
        remote=f.string("remote"),
    )


def _decode_watch(f: _Fields) -> Watch:
    return Watch(
        enable=f.boolean("enable"),
        json=f.boolean("json"),
        nmea=f.boolean("nmea"),
        raw=f.integer("raw"),
        scaled=f.boolean("scaled"),
        timing=f.boolean("timing"),
        split24=f.boolean("split24"),
        pps=f.boolean("pps"),
        device=f.string("device"),
    )


def _decode_gst(f: _Fields) -> Gst:
    return Gst(
        device=f.string("device"),
        time=f.timestamp("time"),
        rms=f.number("rms"),
        major=f.number("major"),
        minor=f.number("minor"),
        orient=f.number("orient"),
        lat=f.number("lat"),
        lon=f.number("lon"),
        alt=f.number("alt"),
    )


def _decode_pps(f: _Fields) -> Pps:
    return Pps(
        device=f.string("device", required=True),
        real_sec=f.number("real_sec", required=True),
        real_nsec=f.number("real_nsec", required=True),
        clock_sec=f.number("clock_sec", required=True),
        clock_nsec=f.number("clock_nsec", required=True),
        precision=f.number("precision", required=True),
        qerr=f.integer("qErr"),
    )


def _decode_toff(f: _Fields) -> Toff:
    return Toff(
        device=f.string("device", required=True),
        real_sec=f.number("real_sec", required=True),
        real_nsec=f.number("real_nsec", required=True),
        clock_sec=f.number("clock_sec", required=True),
        clock_nsec=f.number("clock_nsec", required=True),
    )


def _decode_att(f: _Fields) -> Att:
    return Att(
        device=f.string("device"),
        time=f.timestamp("time"),
        heading=f.number("heading"),
        mag_st=f.string("mag_st"),
        pitch=f.number("pitch"),
        pitch_st=f.string("pitch_st"),
        yaw=f.number("yaw"),
        yaw_st=f.string("yaw_st"),
        roll=f.number("roll"),
        roll_st=f.string("roll_st"),
        dip=f.number("dip"),
        mag_len=f.number("mag_len"),
        mag_x=f.number("mag_x"),
        mag_y=f.number("mag_y"),
        mag_z=f.number("mag_z"),
        acc_len=f.number("acc_len"),
        acc_x=f.number("acc_x"),
        acc_y=f.number("acc_y"),
        acc_z=f.number("acc_z"),
        gyro_x=f.number("gyro_x"),
        gyro_y=f.number("gyro_y"),
        depth=f.number("depth"),
        temp=f.number("temp"),
    )


def _decode_poll(f: _Fields) -> Poll:
    return Poll(
        time=f.timestamp("time"),
        active=f.integer("active"),
        tpv=tuple(_decode_tpv(t) for t in f.objects("tpv")),
        gst=tuple(_decode_gst(g) for g in f.objects("gst")),
        sky=tuple(_decode_sky(s) for s in f.objects("sky")),
    )


def _decode_error(f: _Fields) -> Error:
    return Error(message=f.string("message", required=True))


_DECODERS: dict[str, Callable[[_Fields], ProtocolMessage]] = {
    "VERSION": _decode_version,
    "TPV": _decode_tpv,
    "SKY": _decode_sky,
    "DEVICE": _decode_device,
    "DEVICES": _decode_devices,
    "WATCH": _decode_watch,
    "GST": _decode_gst,
    "PPS": _decode_pps,
    "TOFF": _decode_toff,
    "ATT": _decode_att,
    "POLL": _decode_poll,
    "ERROR": _decode_error,
}

KNOWN_CLASSES: frozenset[str] = frozenset(_DECODERS)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def decode(frame: str | bytes, *, allow_unknown: bool = False) -> ProtocolMessage:
    """Decode one frame into a report message.

    Args:
        frame: One line of the gpsd stream without its terminator.
        allow_unknown: Return Unknown instead of raising UnknownClassError
            when the class token is not recognised.

    Returns:
        The typed report.

    Raises:
        MalformedJsonError: Frame is not valid UTF-8 JSON.
        MissingDiscriminatorError: Frame is not an object with a string class.
        UnknownClassError: Class token not recognised (unless allow_unknown).
        FieldError: A required field is missing or a field has the wrong type.
    """
    if isinstance(frame, (bytes, bytearray)):
        try:
            raw = bytes(frame).decode("utf-8")
        except UnicodeDecodeError as err:
            raise MalformedJsonError(
                bytes(frame).decode("utf-8", errors="replace"), "Frame is not UTF-8"
            ) from err
    else:
        raw = frame

    # ValueError also covers integer literals beyond the int digit limit.
    try:
        obj = json.loads(raw)
    except (ValueError, RecursionError) as err:
        raise MalformedJsonError(raw, "Frame is not valid JSON") from err

    return decode_object(obj, raw=raw, allow_unknown=allow_unknown)


def decode_object(
    obj: Any, *, raw: str | None = None, allow_unknown: bool = False
) -> ProtocolMessage:
    """Decode an already-parsed JSON value.

    Args:
        obj: Parsed JSON value.
        raw: Frame text reported in errors; serialised from obj when omitted.
        allow_unknown: Return Unknown for unrecognised class tokens.
    """
    if raw is None:
        raw = json.dumps(obj, separators=(",", ":"))

    if not isinstance(obj, dict):
        raise MissingDiscriminatorError(raw, "Frame is not a JSON object")
    class_name = obj.get(DISCRIMINATOR)
    if class_name is None:
        raise MissingDiscriminatorError(raw, 'Frame has no "class" member')
    if not isinstance(class_name, str):
        raise MissingDiscriminatorError(raw, '"class" member is not a string')

    decoder = _DECODERS.get(class_name)
    if decoder is None:
        if allow_unknown:
            _LOGGER.debug("Passing through unknown class %s", class_name)
            return Unknown(class_name=class_name, payload=obj)
        raise UnknownClassError(raw, class_name)
    return decoder(_Fields(obj, raw, class_name))
