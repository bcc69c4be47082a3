import contextlib
import io
import json
import ok_logging_setup
import os
import pty
import pytest
import typing

from cashdrawer import _scanning

ok_logging_setup.install(
    {
        "OK_LOGGING_LEVEL": "cashdrawer=DEBUG,WARNING",
        "OK_LOGGING_OUTPUT": "stdout",
    }
)


class PseudoTtySerial(typing.NamedTuple):
    path: str
    control: io.FileIO
    simulated: io.FileIO


@pytest.fixture
def pty_serial():
    with contextlib.ExitStack() as cleanup:
        ctrl_fd, sim_fd = pty.openpty()
        path = os.ttyname(sim_fd)
        ctrl = cleanup.enter_context(os.fdopen(ctrl_fd, "r+b", buffering=0))
        sim = cleanup.enter_context(os.fdopen(sim_fd, "r+b", buffering=0))
        yield PseudoTtySerial(path=path, control=ctrl, simulated=sim)


@pytest.fixture
def set_scan_override(monkeypatch, tmp_path):
    path = tmp_path / "scan.json"
    path.write_text("{}")
    monkeypatch.setenv(_scanning.SCAN_OVERRIDE_ENV, str(path))

    def set_devices(devices: dict[str, dict[str, str]]):
        path.write_text(json.dumps(devices))

    return set_devices


@pytest.fixture
def no_scan_override(monkeypatch):
    monkeypatch.delenv(_scanning.SCAN_OVERRIDE_ENV, raising=False)
