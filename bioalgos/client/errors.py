class DataServiceError(Exception):
    """Base class for data-layer failures."""


class TransportError(DataServiceError):
    """The remote API could not be reached or answered with a failure status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class CorruptStoreError(DataServiceError):
    """A value in the local store is not valid JSON."""

    def __init__(self, key, cause=None):
        super().__init__(f'Stored value for {key!r} is not valid JSON: {cause}')
        self.key = key
        self.cause = cause


class ConflictError(DataServiceError):
    """A record with the requested id already exists."""

    def __init__(self, message, key=None):
        super().__init__(message)
        self.key = key
