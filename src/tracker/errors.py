class TrackerError(Exception):
    pass


class SourceUnavailable(TrackerError, IOError):
    """The transaction snapshot does not exist or cannot be opened."""

    def __init__(self, source, reason=None):
        self.source = source
        self.reason = reason
        message = f"binder transaction source unavailable: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class MalformedLine(TrackerError, ValueError):
    """A candidate line whose from/to fields are not usable PIDs."""

    def __init__(self, line, reason):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line!r}")


class InternalFault(TrackerError, RuntimeError):
    pass
