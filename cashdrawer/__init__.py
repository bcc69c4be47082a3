"""
Cash drawer trigger control (PySerial wrapper) with USB port discovery.
"""

from beartype.claw import beartype_this_package as _beartype_me

# ruff: noqa: E402
_beartype_me()

from cashdrawer._drawer import (
    COMMAND_FRAME,
    CashDrawer,
    DrawerOptions,
)

from cashdrawer._exceptions import (
    CashDrawerException,
    DrawerClosed,
    DrawerDiscoveryUnsupported,
    DrawerIoException,
    DrawerMatcherInvalid,
    DrawerNotFound,
    DrawerOpenBusy,
    DrawerOpenException,
    DrawerScanException,
    DrawerShortWrite,
)

from cashdrawer._discovery import (
    DEFAULT_RULES,
    DRAWER_MANUFACTURER,
    PortDiscovery,
    discover_port,
    get_port_discovery,
    open_discovered,
)

from cashdrawer._matcher import MatchRule, MatchSet
from cashdrawer._scanning import DeviceRecord, scan_devices, scanning_supported

__all__ = [n for n in dir() if not n.startswith("_")]
