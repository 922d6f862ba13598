"""Command requests sent from the client to gpsd.

Commands are a separate family from reports even where the shapes overlap
(WATCH exists in both directions). Every optional field defaults to None and
None fields are left off the wire; no command field is ever sent as null.
False and 0 are values the caller chose and are always sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from .messages import Watch

_PARITIES = frozenset({"N", "O", "E"})


@dataclass(frozen=True)
class WatchCommand:
    """?WATCH: change the subscriber policy.

    Wire fields: enable, json, nmea, raw, scaled, timing, split24, pps,
    device; each omitted when None.
    """

    enable: bool | None = None
    json: bool | None = None
    nmea: bool | None = None
    raw: int | None = None
    scaled: bool | None = None
    timing: bool | None = None
    split24: bool | None = None
    pps: bool | None = None
    device: str | None = None

    def __post_init__(self) -> None:
        if self.raw is not None and self.raw not in (0, 1, 2):
            raise ValueError(f"raw must be 0, 1 or 2, got {self.raw!r}")

    @classmethod
    def from_report(cls, report: Watch) -> WatchCommand:
        """Build the command that requests the policy a WATCH report shows."""
        return cls(
            enable=report.enable,
            json=report.json,
            nmea=report.nmea,
            raw=report.raw,
            scaled=report.scaled,
            timing=report.timing,
            split24=report.split24,
            pps=report.pps,
            device=report.device,
        )

    def to_report(self) -> Watch:
        """Return the WATCH report the daemon echoes for this exact policy."""
        return Watch(
            enable=self.enable,
            json=self.json,
            nmea=self.nmea,
            raw=self.raw,
            scaled=self.scaled,
            timing=self.timing,
            split24=self.split24,
            pps=self.pps,
            device=self.device,
        )


@dataclass(frozen=True)
class PollCommand:
    """?POLL: request the latest fix of every active device. No fields."""


@dataclass(frozen=True)
class VersionCommand:
    """?VERSION: request a VERSION report. No fields."""


@dataclass(frozen=True)
class DevicesCommand:
    """?DEVICES: request the device inventory. No fields."""


@dataclass(frozen=True)
class DeviceCommand:
    """?DEVICE: query or configure one receiver.

    Wire fields: path, bps, parity, stopbits, native, cycle; each omitted
    when None. With no fields set the daemon reports the current settings.
    """

    path: str | None = None
    bps: int | None = None
    parity: str | None = None
    stopbits: int | None = None
    native: int | None = None
    cycle: float | None = None

    def __post_init__(self) -> None:
        if self.parity is not None and self.parity not in _PARITIES:
            raise ValueError(f"parity must be one of N, O, E; got {self.parity!r}")
        if self.stopbits is not None and self.stopbits not in (1, 2):
            raise ValueError(f"stopbits must be 1 or 2, got {self.stopbits!r}")
        if self.native is not None and self.native not in (0, 1):
            raise ValueError(f"native must be 0 or 1, got {self.native!r}")


@dataclass(frozen=True)
class RawCommand:
    """Text passed to the daemon verbatim, e.g. '?WATCH={"enable":false};'."""

    text: str

    def __post_init__(self) -> None:
        if "\n" in self.text or "\r" in self.text:
            raise ValueError("raw command text must not contain line breaks")


CommandRequest: TypeAlias = (
    WatchCommand
    | PollCommand
    | VersionCommand
    | DevicesCommand
    | DeviceCommand
    | RawCommand
)

ENABLE_WATCH = WatchCommand(enable=True, json=True)
DISABLE_WATCH = WatchCommand(enable=False)
