import contextlib
import errno
import logging
import os
import serial

import pydantic

from cashdrawer import _exceptions

log = logging.getLogger("cashdrawer.drawer")
data_log = logging.getLogger(log.name + ".data")

# ESC p 0 48: pulse drawer pin 2
COMMAND_FRAME = b"\x1b\x70\x00\x30"


class DrawerOptions(pydantic.BaseModel):
    baud: int = 9600


class CashDrawer(contextlib.AbstractContextManager):
    """A serial connection to a cash drawer trigger, open until close()"""

    @pydantic.validate_call
    def __init__(self, port: str, opts: DrawerOptions | int = DrawerOptions()):
        if isinstance(opts, int):
            opts = DrawerOptions(baud=opts)

        self.port = port
        self.baud = opts.baud

        log.debug("Opening %s (%s)", port, opts)
        try:
            self._serial = serial.Serial(
                port=port,
                baudrate=opts.baud,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=None,  # blocking reads return after 1+ bytes
                write_timeout=None,
            )
        except ValueError as ex:
            message = f"Bad serial parameters (baud={opts.baud})"
            raise _exceptions.DrawerOpenException(message, port) from ex
        except OSError as ex:
            if ex.errno == errno.EBUSY:
                message = "Serial port busy (EBUSY)"
                raise _exceptions.DrawerOpenBusy(message, port) from ex
            else:
                detail = os.strerror(ex.errno) if ex.errno else str(ex)
                message = f"Serial port open error ({detail})"
                raise _exceptions.DrawerOpenException(message, port) from ex

    def __del__(self) -> None:
        if pyserial := getattr(self, "_serial", None):
            self._serial = None
            try:
                pyserial.close()
            except OSError:
                log.warning("Can't close %s", self.port, exc_info=True)

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        state = " closed" if self.closed else ""
        return f"CashDrawer({self.port!r}, baud={self.baud}){state}"

    @property
    def closed(self) -> bool:
        return self._serial is None

    @pydantic.validate_call
    def trigger(self) -> None:
        """Sends the open command; raises DrawerShortWrite on partial writes"""

        pyserial = self._live()
        try:
            written = pyserial.write(COMMAND_FRAME) or 0
            pyserial.flush()
        except OSError as ex:
            message = "Serial write error"
            raise _exceptions.DrawerIoException(message, self.port) from ex

        data_log.debug("Wrote %d/%db", written, len(COMMAND_FRAME))
        if written != len(COMMAND_FRAME):
            message = f"Short write ({written}/{len(COMMAND_FRAME)}b)"
            raise _exceptions.DrawerShortWrite(message, self.port, written)

    @pydantic.validate_call
    def close(self) -> None:
        pyserial = self._live()
        self._serial = None
        log.debug("Closing %s", self.port)
        try:
            pyserial.close()
        except OSError as ex:
            message = "Serial port close error"
            raise _exceptions.DrawerIoException(message, self.port) from ex

    def _live(self):
        if self._serial is None:
            message = "Serial port was closed"
            raise _exceptions.DrawerClosed(message, self.port)
        return self._serial
