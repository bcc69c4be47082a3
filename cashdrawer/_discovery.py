"""Finding the cash drawer trigger's serial port by device attributes"""

import logging

from cashdrawer import _drawer
from cashdrawer import _exceptions
from cashdrawer import _matcher
from cashdrawer import _scanning

log = logging.getLogger("cashdrawer.discovery")

DRAWER_MANUFACTURER = "Prolific Technology Inc."
DEVICE_DIR = "/dev"

DEFAULT_RULES = _matcher.MatchSet(
    rules=(
        _matcher.MatchRule(attr="manufacturer", value=DRAWER_MANUFACTURER),
        _matcher.MatchRule(attr="kind", value="tty"),
    ),
    strategy="and",
)


class PortDiscovery:
    """Scans attached devices for ones matching 'rules'"""

    def __init__(
        self,
        rules: _matcher.MatchSet = DEFAULT_RULES,
        device_dir: str = DEVICE_DIR,
    ):
        self.rules = rules
        self.device_dir = device_dir

    def __repr__(self) -> str:
        return f"PortDiscovery({self.rules!r}, device_dir={self.device_dir!r})"

    def find(self) -> list[_scanning.DeviceRecord]:
        """All matching devices, in enumeration order (may be empty)"""

        return self.rules.filter(_scanning.scan_devices())

    def port_path(self, device: _scanning.DeviceRecord) -> str:
        if device.name.startswith("/"):
            return device.name  # already a full path
        return f"{self.device_dir.rstrip('/')}/{device.name}"

    def discover_port(self) -> str:
        """Path of the first matching device; raises DrawerNotFound if none"""

        found = self.find()
        if not found:
            message = f"No cash drawer device found (matching {self.rules})"
            raise _exceptions.DrawerNotFound(message)

        path = self.port_path(found[0])
        if len(found) > 1:
            others = ", ".join(d.name for d in found[1:])
            log.info("Using %s (also matched: %s)", path, others)
        else:
            log.debug("Found %s", path)
        return path


def get_port_discovery(
    rules: _matcher.MatchSet = DEFAULT_RULES,
) -> PortDiscovery | None:
    """A PortDiscovery, or None if this system can't enumerate devices"""

    if not _scanning.scanning_supported():
        log.debug("No device scanning on this system")
        return None
    return PortDiscovery(rules)


def discover_port(rules: _matcher.MatchSet = DEFAULT_RULES) -> str:
    if not (discovery := get_port_discovery(rules)):
        message = "Port discovery is only supported on Linux"
        raise _exceptions.DrawerDiscoveryUnsupported(message)
    return discovery.discover_port()


def open_discovered(
    opts: _drawer.DrawerOptions | int = _drawer.DrawerOptions(),
    rules: _matcher.MatchSet = DEFAULT_RULES,
) -> _drawer.CashDrawer:
    """Finds the drawer's port and opens it"""

    return _drawer.CashDrawer(discover_port(rules), opts)
