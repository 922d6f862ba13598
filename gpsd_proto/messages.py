"""Report messages emitted by gpsd.

Every report is an immutable value object. Optional fields default to None,
which means "not reported by the daemon" and is distinct from a reported
zero or false. Wire names that are not valid snake_case identifiers are
mapped to Python names by the decoder (PRN -> prn, altMSL -> alt_msl, ...).

Reference: https://gpsd.io/gpsd_json.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, TypeAlias


class Mode(IntEnum):
    """NMEA fix mode reported in TPV."""

    NO_FIX = 1
    FIX_2D = 2
    FIX_3D = 3

    def __str__(self) -> str:
        return _MODE_LABELS[self]

    @classmethod
    def from_wire(cls, value: int) -> Mode:
        """Map the wire mode; 0 (unknown) and out-of-range values mean no fix."""
        if value == 2:
            return cls.FIX_2D
        if value == 3:
            return cls.FIX_3D
        return cls.NO_FIX


_MODE_LABELS = {
    Mode.NO_FIX: "NoFix",
    Mode.FIX_2D: "2d",
    Mode.FIX_3D: "3d",
}

# Timestamps are ISO-8601 strings; daemons before protocol 3.10 sent epoch
# seconds instead, which are kept as numbers.
Timestamp: TypeAlias = str | float


@dataclass(frozen=True)
class Version:
    """VERSION report, sent to every client on connect."""

    release: str
    rev: str
    proto_major: int
    proto_minor: int
    remote: str | None = None


@dataclass(frozen=True)
class Tpv:
    """Time-position-velocity report.

    Position fields are present only when the fix mode allows them: lat/lon
    for 2D and 3D fixes, alt for 3D. Error estimates (ep*) are 95%
    confidence values in the unit of the quantity they qualify.
    """

    mode: Mode
    device: str | None = None
    status: int | None = None
    time: Timestamp | None = None
    ept: float | None = None
    leapseconds: int | None = None
    alt_msl: float | None = None
    alt_hae: float | None = None
    geoid_sep: float | None = None
    lat: float | None = None
    lon: float | None = None
    alt: float | None = None
    epx: float | None = None
    epy: float | None = None
    epv: float | None = None
    track: float | None = None
    speed: float | None = None
    climb: float | None = None
    epd: float | None = None
    eps: float | None = None
    epc: float | None = None
    eph: float | None = None


@dataclass(frozen=True)
class Satellite:
    """One satellite of a SKY view.

    Attributes:
        prn: PRN id. 1-63 GNSS, 64-96 GLONASS, 100-164 SBAS.
        used: Whether the satellite is used in the current solution.
        elevation: Elevation in degrees.
        azimuth: Azimuth in degrees from true north.
        signal_strength: Signal strength in dB-Hz.
        gnssid: GNSS constellation id.
        svid: Satellite id within its constellation.
        health: 0 unknown, 1 ok, 2 unhealthy.
    """

    prn: int
    used: bool
    elevation: float | None = None
    azimuth: float | None = None
    signal_strength: float | None = None
    gnssid: int | None = None
    svid: int | None = None
    health: int | None = None


@dataclass(frozen=True)
class Sky:
    """Sky view report.

    Satellites keep the order the daemon sent them in. Newer daemons emit
    periodic SKY summaries with only n_sat/u_sat and no satellite list; in
    that case satellites is empty and n_sat tells the real count.
    """

    satellites: tuple[Satellite, ...] = ()
    device: str | None = None
    time: Timestamp | None = None
    xdop: float | None = None
    ydop: float | None = None
    vdop: float | None = None
    tdop: float | None = None
    hdop: float | None = None
    gdop: float | None = None
    pdop: float | None = None
    n_sat: int | None = None
    u_sat: int | None = None


@dataclass(frozen=True)
class Device:
    """DEVICE report describing one attached receiver.

    The path may be omitted only when exactly one channel is subscribed.
    """

    path: str | None = None
    activated: Timestamp | None = None
    flags: int | None = None
    driver: str | None = None
    subtype: str | None = None
    bps: int | None = None
    parity: str | None = None
    stopbits: int | None = None
    native: int | None = None
    cycle: float | None = None
    mincycle: float | None = None


@dataclass(frozen=True)
class Devices:
    """DEVICES inventory, in the order the daemon lists them."""

    devices: tuple[Device, ...]
    remote: str | None = None


@dataclass(frozen=True)
class Watch:
    """WATCH report describing the subscriber policy now in effect."""

    enable: bool | None = None
    json: bool | None = None
    nmea: bool | None = None
    raw: int | None = None
    scaled: bool | None = None
    timing: bool | None = None
    split24: bool | None = None
    pps: bool | None = None
    device: str | None = None


@dataclass(frozen=True)
class Gst:
    """Pseudorange noise report; deviations are in meters."""

    device: str | None = None
    time: Timestamp | None = None
    rms: float | None = None
    major: float | None = None
    minor: float | None = None
    orient: float | None = None
    lat: float | None = None
    lon: float | None = None
    alt: float | None = None


@dataclass(frozen=True)
class Pps:
    """PPS report: GPS time and system clock time at the pulse edge.

    Times are numbers as sent; gpsd writes integers, but fractional
    values are accepted.
    """

    device: str
    real_sec: float
    real_nsec: float
    clock_sec: float
    clock_nsec: float
    precision: float
    qerr: int | None = None


@dataclass(frozen=True)
class Toff:
    """TOFF report: GPS time from the serial stream vs. system clock."""

    device: str
    real_sec: float
    real_nsec: float
    clock_sec: float
    clock_nsec: float


@dataclass(frozen=True)
class Att:
    """Attitude report from a compass or IMU."""

    device: str | None = None
    time: Timestamp | None = None
    heading: float | None = None
    mag_st: str | None = None
    pitch: float | None = None
    pitch_st: str | None = None
    yaw: float | None = None
    yaw_st: str | None = None
    roll: float | None = None
    roll_st: str | None = None
    dip: float | None = None
    mag_len: float | None = None
    mag_x: float | None = None
    mag_y: float | None = None
    mag_z: float | None = None
    acc_len: float | None = None
    acc_x: float | None = None
    acc_y: float | None = None
    acc_z: float | None = None
    gyro_x: float | None = None
    gyro_y: float | None = None
    depth: float | None = None
    temp: float | None = None


@dataclass(frozen=True)
class Poll:
    """POLL response: the most recent reports of every active device."""

    time: Timestamp | None = None
    active: int | None = None
    tpv: tuple[Tpv, ...] = ()
    gst: tuple[Gst, ...] = ()
    sky: tuple[Sky, ...] = ()


@dataclass(frozen=True)
class Error:
    """ERROR notice, e.g. in reply to a malformed command."""

    message: str


@dataclass(frozen=True)
class Unknown:
    """A report whose class token is not known to this client.

    Keeps the parsed JSON object so newer message classes can still be
    inspected.
    """

    class_name: str
    payload: dict[str, Any] = field(hash=False)


_CLASS_NAMES: dict[type[Any], str] = {
    Version: "VERSION",
    Tpv: "TPV",
    Sky: "SKY",
    Device: "DEVICE",
    Devices: "DEVICES",
    Watch: "WATCH",
    Gst: "GST",
    Pps: "PPS",
    Toff: "TOFF",
    Att: "ATT",
    Poll: "POLL",
    Error: "ERROR",
}


def class_name(message: ProtocolMessage) -> str:
    """Return the wire class token of a report."""
    if isinstance(message, Unknown):
        return message.class_name
    return _CLASS_NAMES[type(message)]


ProtocolMessage: TypeAlias = (
    Version
    | Tpv
    | Sky
    | Device
    | Devices
    | Watch
    | Gst
    | Pps
    | Toff
    | Att
    | Poll
    | Error
    | Unknown
)
