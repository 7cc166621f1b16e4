"""Exception hierarchy for the check framework."""


class QtLazyError(Exception):
    """Base class for every error raised by qt-lazy."""


class DuplicateNameError(QtLazyError):
    """A check with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Check '{name}' is already registered")
        self.name = name


class DuplicateFixItError(QtLazyError):
    """A fix-it id or flag name collides with an existing registration."""


class UnknownCheckError(QtLazyError):
    """A check name was requested that the registry does not know."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown check '{name}'")
        self.name = name


class ConfigurationError(QtLazyError):
    """Invalid value in [tool.qt-lazy] or on the command line."""


class FrontEndError(QtLazyError):
    """
    The front end could not produce an AST or token stream for a file.

    This is the only fatal error: it aborts the run for that file.
    """

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"{file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason
