import dataclasses
import logging
import os
import pathlib
import sys

import msgspec
import natsort
from serial.tools import list_ports
from serial.tools import list_ports_common

from cashdrawer import _exceptions

log = logging.getLogger("cashdrawer.scanning")

SCAN_OVERRIDE_ENV = "CASHDRAWER_SCAN_OVERRIDE"
SYSFS_TTY_CLASS = "/sys/class/tty"


@dataclasses.dataclass(frozen=True)
class DeviceRecord:
    """What we know about one attached serial device"""

    name: str
    attr: dict[str, str]

    def __str__(self):
        return self.name


def scanning_supported() -> bool:
    """True if scan_devices() has a device source on this system"""

    return bool(os.getenv(SCAN_OVERRIDE_ENV)) or sys.platform.startswith("linux")


def scan_devices() -> list[DeviceRecord]:
    """Returns serial devices found on the current system, in stable order"""

    if ov := os.getenv(SCAN_OVERRIDE_ENV):
        try:
            ov_data = msgspec.json.decode(
                pathlib.Path(ov).read_bytes(),
                type=dict[str, dict[str, str]],
            )
        except (OSError, msgspec.DecodeError) as ex:
            msg = f"Can't read ${SCAN_OVERRIDE_ENV} {ov}"
            raise _exceptions.DrawerScanException(msg) from ex

        out = [DeviceRecord(name=n, attr=a) for n, a in ov_data.items()]
        log.debug("$%s (%s): %d devices", SCAN_OVERRIDE_ENV, ov, len(out))
        return out

    if not sys.platform.startswith("linux"):
        msg = f"Device scanning not supported on {sys.platform}"
        raise _exceptions.DrawerDiscoveryUnsupported(msg)

    try:
        ports = list_ports.comports()
        out = [_convert_port(p) for p in ports]
    except OSError as ex:
        raise _exceptions.DrawerScanException("Can't scan serial") from ex

    out.sort(key=natsort.natsort_keygen(key=lambda d: d.name, alg=natsort.ns.P))
    log.debug("Found %d devices", len(out))
    return out


def _convert_port(p: list_ports_common.ListPortInfo) -> DeviceRecord:
    _NA = (None, "", "n/a")
    attr = {k.lower(): str(v) for k, v in vars(p).items() if v not in _NA}
    name = attr.get("name") or os.path.basename(p.device)
    if kind := _sysfs_kind(name):
        attr["kind"] = kind
    return DeviceRecord(name=name, attr=attr)


def _sysfs_kind(name: str) -> str | None:
    """The sysfs class subsystem of /dev/<name> ("tty" for serial ports)"""

    link = os.path.join(SYSFS_TTY_CLASS, name, "subsystem")
    if not os.path.exists(link):
        return None
    return os.path.basename(os.path.realpath(link))
