"""Exception hierarchy for cashdrawer"""


class CashDrawerException(OSError):
    def __init__(
        self,
        message: str,
        port: str | None = None,
    ):
        super().__init__(f"{port}: {message}" if port else message)
        self.port = port


class DrawerIoException(CashDrawerException):
    pass


class DrawerClosed(DrawerIoException):
    pass


class DrawerShortWrite(DrawerIoException):
    def __init__(self, message: str, port: str | None = None, written: int = 0):
        super().__init__(message, port)
        self.written = written


class DrawerOpenException(CashDrawerException):
    pass


class DrawerOpenBusy(DrawerOpenException):
    pass


class DrawerScanException(CashDrawerException):
    pass


class DrawerNotFound(CashDrawerException):
    pass


class DrawerDiscoveryUnsupported(CashDrawerException):
    pass


class DrawerMatcherInvalid(ValueError):
    pass
