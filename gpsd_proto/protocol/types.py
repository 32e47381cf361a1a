"""gpsd JSON message types.

One frozen dataclass per message class of the gpsd JSON protocol (see
https://gpsd.gitlab.io/gpsd/gpsd_json.html). Each instance is an immutable
snapshot decoded from exactly one JSON object.

Design Decisions:
    1. Optional fields (``float | None``): gpsd omits attributes it cannot
       compute, depending on fix quality and device capability. ``None``
       distinguishes "not reported" from "reported as zero".

    2. Declarative schema: every field carries its wire key and parser in
       the dataclass field metadata (``wire_field``), so the decoder and the
       encoder share a single field catalog.

    3. Separate unions: ``ResponseHandshake`` holds only what may arrive
       during negotiation, ``ResponseData`` only the steady-state payload.
       ``UnifiedResponse`` covers both plus ``Unknown``, the catch-all for
       message classes this package does not model.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from gpsd_proto.protocol.fields import (
    object_list,
    optional_bool,
    optional_float,
    optional_int,
    optional_str,
    parse_activated,
    parse_mode,
    required,
    uint8,
    wire_field,
)
from gpsd_proto.protocol.mode import Mode

__all__ = [
    "Att",
    "Device",
    "DeviceInfo",
    "Devices",
    "Gst",
    "Imu",
    "Mode",
    "Osc",
    "Poll",
    "Pps",
    "ResponseData",
    "ResponseHandshake",
    "Satellite",
    "Sky",
    "Toff",
    "Tpv",
    "UnifiedResponse",
    "Unknown",
    "Version",
    "Watch",
]


# --- handshake messages -------------------------------------------------------


@dataclass(frozen=True)
class Version:
    """Daemon version, sent by gpsd to every client on connect.

    Attributes:
        release: Public release level, e.g. ``"3.25"``.
        rev: Internal revision-control level.
        proto_major: API major revision level (0-255).
        proto_minor: API minor revision level (0-255).
        remote: URL of the remote daemon reporting this version; ``None``
            for the local daemon.
    """

    CLASS: ClassVar[str] = "VERSION"

    release: str = wire_field(required(optional_str))
    rev: str = wire_field(required(optional_str))
    proto_major: int = wire_field(required(uint8))
    proto_minor: int = wire_field(required(uint8))
    remote: str | None = wire_field(optional_str)


@dataclass(frozen=True)
class DeviceInfo:
    """One entry of a DEVICES enumeration.

    Attributes:
        path: Device path, e.g. ``"/dev/ttyACM0"``.
        activated: ISO 8601 activation time, ``None`` if inactive.
    """

    path: str | None = wire_field(optional_str)
    activated: str | None = wire_field(parse_activated)


@dataclass(frozen=True)
class Devices:
    """List of devices known to the daemon."""

    CLASS: ClassVar[str] = "DEVICES"

    devices: tuple[DeviceInfo, ...] = wire_field(required(object_list(DeviceInfo)))
    remote: str | None = wire_field(optional_str)


@dataclass(frozen=True)
class Watch:
    """Per-subscriber watch policy, echoed by gpsd after ``?WATCH``.

    Attributes:
        enable: Watcher mode on or off.
        json: JSON reports are dumped.
        nmea: Binary packets are dumped as pseudo-NMEA.
        raw: Raw mode level (1 = hex dump, 2 = verbatim).
        scaled: Scaling divisors are applied before dumping.
        split24: AIS type 24 parts are reported separately.
        pps: TOFF and PPS reports are emitted.
        timing: Undocumented timing flag.
        device: Device the policy is restricted to.
    """

    CLASS: ClassVar[str] = "WATCH"

    enable: bool | None = wire_field(optional_bool)
    json: bool | None = wire_field(optional_bool)
    nmea: bool | None = wire_field(optional_bool)
    raw: int | None = wire_field(optional_int)
    scaled: bool | None = wire_field(optional_bool)
    split24: bool | None = wire_field(optional_bool)
    pps: bool | None = wire_field(optional_bool)
    timing: bool | None = wire_field(optional_bool)
    device: str | None = wire_field(optional_str)


# --- payload messages ---------------------------------------------------------


@dataclass(frozen=True)
class Device:
    """Device status report.

    Attributes:
        path: Device path.
        activated: ISO 8601 activation time, ``None`` if inactive.
        flags: Bit vector of packet types seen so far (GPS, RTCM2, ...).
        driver: gpsd driver name.
        subtype: Version information returned by the device.
        subtype1: Further version information.
        bps: Line speed in bits per second.
        parity: ``"N"``, ``"O"`` or ``"E"``.
        stopbits: 1 or 2.
        native: 0 for NMEA mode, 1 for the alternate (binary) mode.
        cycle: Cycle time in seconds.
        mincycle: Minimum cycle time in seconds, when the rate is switchable.
    """

    CLASS: ClassVar[str] = "DEVICE"

    path: str | None = wire_field(optional_str)
    activated: str | None = wire_field(parse_activated)
    flags: int | None = wire_field(optional_int)
    driver: str | None = wire_field(optional_str)
    subtype: str | None = wire_field(optional_str)
    subtype1: str | None = wire_field(optional_str)
    bps: int | None = wire_field(optional_int)
    parity: str | None = wire_field(optional_str)
    stopbits: int | None = wire_field(optional_int)
    native: int | None = wire_field(optional_int)
    cycle: float | None = wire_field(optional_float)
    mincycle: float | None = wire_field(optional_float)


@dataclass(frozen=True)
class Tpv:
    """Time-position-velocity report.

    Position fields are present when ``mode`` is 2D or 3D, altitudes only
    with a 3D fix; error estimates are 95% confidence values in meters (or
    m/s, degrees) and appear when DOPs could be computed.

    Example:
        >>> tpv = Tpv(mode=Mode.FIX_3D, lat=66.123)
        >>> tpv.mode, tpv.lat, tpv.lon
        (<Mode.FIX_3D: 3>, 66.123, None)
    """

    CLASS: ClassVar[str] = "TPV"

    device: str | None = wire_field(optional_str)
    status: int | None = wire_field(optional_int)
    mode: Mode = wire_field(parse_mode, default=Mode.NO_FIX)
    time: str | None = wire_field(optional_str)
    ept: float | None = wire_field(optional_float)
    leapseconds: int | None = wire_field(optional_int)
    lat: float | None = wire_field(optional_float)
    lon: float | None = wire_field(optional_float)
    alt: float | None = wire_field(optional_float)
    alt_msl: float | None = wire_field(optional_float, "altMSL")
    alt_hae: float | None = wire_field(optional_float, "altHAE")
    geoid_sep: float | None = wire_field(optional_float, "geoidSep")
    epx: float | None = wire_field(optional_float)
    epy: float | None = wire_field(optional_float)
    epv: float | None = wire_field(optional_float)
    eph: float | None = wire_field(optional_float)
    track: float | None = wire_field(optional_float)
    magtrack: float | None = wire_field(optional_float)
    magvar: float | None = wire_field(optional_float)
    speed: float | None = wire_field(optional_float)
    climb: float | None = wire_field(optional_float)
    epd: float | None = wire_field(optional_float)
    eps: float | None = wire_field(optional_float)
    epc: float | None = wire_field(optional_float)
    vel_n: float | None = wire_field(optional_float, "velN")
    vel_e: float | None = wire_field(optional_float, "velE")
    vel_d: float | None = wire_field(optional_float, "velD")
    ecefx: float | None = wire_field(optional_float)
    ecefy: float | None = wire_field(optional_float)
    ecefz: float | None = wire_field(optional_float)
    ecefp_acc: float | None = wire_field(optional_float, "ecefpAcc")
    ecefvx: float | None = wire_field(optional_float)
    ecefvy: float | None = wire_field(optional_float)
    ecefvz: float | None = wire_field(optional_float)
    ecefv_acc: float | None = wire_field(optional_float, "ecefvAcc")
    sep: float | None = wire_field(optional_float)
    datum: str | None = wire_field(optional_str)
    dgps_age: float | None = wire_field(optional_float, "dgpsAge")
    dgps_sta: int | None = wire_field(optional_int, "dgpsSta")


@dataclass(frozen=True)
class Satellite:
    """One satellite of a sky view.

    Attributes:
        prn: PRN id. Signed, since numbering schemes differ per constellation.
        el: Elevation in degrees.
        az: Azimuth in degrees from true north.
        ss: Signal strength in dB-Hz.
        used: Whether the satellite is used in the current solution.
        gnssid: u-blox style constellation id.
        svid: Satellite id within the constellation.
        sigid: Signal id.
        freqid: GLONASS frequency id.
        health: 0 unknown, 1 healthy, 2 unhealthy.
        pr_res: Pseudorange residue in meters.
        qual: Signal quality indicator.
    """

    prn: int = wire_field(required(optional_int), "PRN")
    used: bool = wire_field(required(optional_bool), default=False)
    el: float | None = wire_field(optional_float)
    az: float | None = wire_field(optional_float)
    ss: float | None = wire_field(optional_float)
    gnssid: int | None = wire_field(optional_int)
    svid: int | None = wire_field(optional_int)
    sigid: int | None = wire_field(optional_int)
    freqid: int | None = wire_field(optional_int)
    health: int | None = wire_field(optional_int)
    pr_res: float | None = wire_field(optional_float, "prRes")
    qual: int | None = wire_field(optional_int)


@dataclass(frozen=True)
class Sky:
    """Sky view: dilution of precision factors and visible satellites.

    DOPs are dimensionless factors to multiply with a base UERE. gpsd passes
    through what the device reports and fills in the rest from the satellite
    geometry, so any of them may be missing.
    """

    CLASS: ClassVar[str] = "SKY"

    device: str | None = wire_field(optional_str)
    time: str | None = wire_field(optional_str)
    xdop: float | None = wire_field(optional_float)
    ydop: float | None = wire_field(optional_float)
    vdop: float | None = wire_field(optional_float)
    tdop: float | None = wire_field(optional_float)
    hdop: float | None = wire_field(optional_float)
    gdop: float | None = wire_field(optional_float)
    pdop: float | None = wire_field(optional_float)
    n_sat: int | None = wire_field(optional_int, "nSat")
    u_sat: int | None = wire_field(optional_int, "uSat")
    satellites: tuple[Satellite, ...] | None = wire_field(object_list(Satellite))


@dataclass(frozen=True)
class Toff:
    """Time offset between the GPS serial time and the system clock."""

    CLASS: ClassVar[str] = "TOFF"

    device: str | None = wire_field(optional_str)
    real_sec: int | None = wire_field(optional_int)
    real_nsec: int | None = wire_field(optional_int)
    clock_sec: int | None = wire_field(optional_int)
    clock_nsec: int | None = wire_field(optional_int)
    precision: int | None = wire_field(optional_int)
    shm: str | None = wire_field(optional_str)


@dataclass(frozen=True)
class Pps:
    """Pulse-per-second strobe report.

    ``real_*`` is the GPS time at the PPS edge, ``clock_*`` the system clock
    time at that moment. ``precision`` is the NTP style precision estimate,
    ``q_err`` the quantization error of the edge in picoseconds.
    """

    CLASS: ClassVar[str] = "PPS"

    device: str | None = wire_field(optional_str)
    real_sec: int | None = wire_field(optional_int)
    real_nsec: int | None = wire_field(optional_int)
    clock_sec: int | None = wire_field(optional_int)
    clock_nsec: int | None = wire_field(optional_int)
    precision: int | None = wire_field(optional_int)
    shm: str | None = wire_field(optional_str)
    q_err: int | None = wire_field(optional_int, "qErr")


@dataclass(frozen=True)
class Gst:
    """Pseudorange noise report. Deviations are in meters."""

    CLASS: ClassVar[str] = "GST"

    device: str | None = wire_field(optional_str)
    time: str | None = wire_field(optional_str)
    rms: float | None = wire_field(optional_float)
    major: float | None = wire_field(optional_float)
    minor: float | None = wire_field(optional_float)
    orient: float | None = wire_field(optional_float)
    lat: float | None = wire_field(optional_float)
    lon: float | None = wire_field(optional_float)
    alt: float | None = wire_field(optional_float)


@dataclass(frozen=True)
class _Attitude:
    """Fields shared by ATT and IMU reports. Angles are in degrees."""

    device: str | None = wire_field(optional_str)
    time: str | None = wire_field(optional_str)
    heading: float | None = wire_field(optional_float)
    mag_st: str | None = wire_field(optional_str)
    pitch: float | None = wire_field(optional_float)
    pitch_st: str | None = wire_field(optional_str)
    roll: float | None = wire_field(optional_float)
    roll_st: str | None = wire_field(optional_str)
    yaw: float | None = wire_field(optional_float)
    yaw_st: str | None = wire_field(optional_str)
    dip: float | None = wire_field(optional_float)
    mag_len: float | None = wire_field(optional_float)
    mag_x: float | None = wire_field(optional_float)
    mag_y: float | None = wire_field(optional_float)
    mag_z: float | None = wire_field(optional_float)
    acc_len: float | None = wire_field(optional_float)
    acc_x: float | None = wire_field(optional_float)
    acc_y: float | None = wire_field(optional_float)
    acc_z: float | None = wire_field(optional_float)
    gyro_temp: float | None = wire_field(optional_float)
    gyro_x: float | None = wire_field(optional_float)
    gyro_y: float | None = wire_field(optional_float)
    gyro_z: float | None = wire_field(optional_float)
    depth: float | None = wire_field(optional_float)
    temp: float | None = wire_field(optional_float)


@dataclass(frozen=True)
class Att(_Attitude):
    """Vehicle attitude report from a gyro or digital compass."""

    CLASS: ClassVar[str] = "ATT"


@dataclass(frozen=True)
class Imu(_Attitude):
    """Raw inertial measurement report; ATT fields plus the sample tag."""

    CLASS: ClassVar[str] = "IMU"

    time_tag: int | None = wire_field(optional_int, "timeTag")


@dataclass(frozen=True)
class Osc:
    """Oscillator discipline state of a GPSDO."""

    CLASS: ClassVar[str] = "OSC"

    device: str | None = wire_field(optional_str)
    running: bool | None = wire_field(optional_bool)
    reference: bool | None = wire_field(optional_bool)
    disciplined: bool | None = wire_field(optional_bool)
    delta: int | None = wire_field(optional_int)


@dataclass(frozen=True)
class Poll:
    """Reply to ``?POLL``: the latest reports of every active device."""

    CLASS: ClassVar[str] = "POLL"

    time: str | None = wire_field(optional_str)
    active: int | None = wire_field(optional_int)
    tpv: tuple[Tpv, ...] | None = wire_field(object_list(Tpv))
    sky: tuple[Sky, ...] | None = wire_field(object_list(Sky))
    gst: tuple[Gst, ...] | None = wire_field(object_list(Gst))


@dataclass(frozen=True)
class Unknown:
    """A message whose class is not modeled here, kept verbatim.

    Only produced by the unified decoder.

    Attributes:
        class_name: Raw value of the ``class`` discriminator.
        payload: The remaining attributes of the parsed JSON object, without
            ``class``. Not part of the hash.
    """

    class_name: str
    payload: dict[str, Any] = field(default_factory=dict, hash=False)


ResponseHandshake = Union[Version, Devices, Watch]
ResponseData = Union[Device, Tpv, Sky, Pps, Gst, Att, Imu, Toff, Osc, Poll]
UnifiedResponse = Union[ResponseHandshake, ResponseData, Unknown]
