"""Exception types raised by loadfire.

``ConfigError`` and ``DataLoadError`` are fatal and stop the tool before the
first request goes out. ``InvalidHeader`` is raised while building a single
request and only ever fails that one request.
"""


class LoadfireError(Exception):
    """Base class for every loadfire error."""


class ConfigError(LoadfireError):
    pass


class DataLoadError(LoadfireError):
    pass


class InvalidHeader(LoadfireError):
    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid header {name!r}: {reason}")
