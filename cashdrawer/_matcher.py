import collections.abc
import logging
import typing

import msgspec

from cashdrawer import _exceptions
from cashdrawer import _scanning

log = logging.getLogger("cashdrawer.matching")

MatchStrategy = typing.Literal["and", "or"]


class MatchRule(msgspec.Struct, frozen=True):
    """Selects devices whose attribute 'attr' is exactly 'value'"""

    attr: str
    value: str

    @classmethod
    def parse(cls, text: str) -> "MatchRule":
        """Parses 'attr=value' (value may contain '=' and spaces)"""

        attr, eq, value = text.partition("=")
        if not (eq and attr.strip()):
            raise _exceptions.DrawerMatcherInvalid(
                f"Bad match rule {text!r} (expected attr=value)"
            )
        return cls(attr=attr.strip(), value=value)

    def __str__(self) -> str:
        return f"{self.attr}={self.value!r}"

    def matches(self, device: _scanning.DeviceRecord) -> bool:
        return self.attr in device.attr and device.attr[self.attr] == self.value


class MatchSet(msgspec.Struct, frozen=True):
    """Rules combined by 'strategy': "and" (all pass) or "or" (any passes)"""

    rules: tuple[MatchRule, ...] = ()
    strategy: MatchStrategy = "and"

    def __post_init__(self):
        if self.strategy not in typing.get_args(MatchStrategy):
            raise _exceptions.DrawerMatcherInvalid(
                f"Bad match strategy {self.strategy!r} (use 'and' or 'or')"
            )

    def __str__(self) -> str:
        if not self.rules:
            return "(any)" if self.strategy == "and" else "(none)"
        return f" {self.strategy} ".join(str(r) for r in self.rules)

    def matches(self, device: _scanning.DeviceRecord) -> bool:
        combine = all if self.strategy == "and" else any
        return combine(r.matches(device) for r in self.rules)

    def filter(
        self, devices: collections.abc.Iterable[_scanning.DeviceRecord]
    ) -> list[_scanning.DeviceRecord]:
        """The devices matching this set, in their original order"""

        devices = list(devices)
        out = [d for d in devices if self.matches(d)]
        log.debug("%d/%d devices match %s", len(out), len(devices), self)
        return out
