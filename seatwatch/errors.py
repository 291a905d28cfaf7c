class FetchError(Exception):
    """A fetch that produced nothing usable. Every kind costs one retry."""
    kind = "fetch"

    def __init__(self, message, body=None):
        super().__init__(message)
        self.body = body


class TransportError(FetchError):
    kind = "transport"


class DecodeError(FetchError):
    kind = "decode"


class PayloadShapeError(FetchError):
    kind = "shape"


class EmptyPayloadError(FetchError):
    kind = "empty"


class RosterError(Exception):
    pass
