"""Engine error types.

The parsing core is total: classification and extraction signal failure
with False/None, never by raising. These exceptions belong to the edges,
where collaborator payloads are turned into engine types.
"""


class SmsEngineError(Exception):
    """Base engine error."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class InvalidMessageError(SmsEngineError):
    """A raw message payload is missing a field or has the wrong type."""

    def __init__(self, detail: str = "Invalid message payload", field: str = ""):
        super().__init__(detail=detail)
        self.field = field
