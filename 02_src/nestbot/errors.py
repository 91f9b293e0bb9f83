"""Exception hierarchy for nestbot."""


class NestbotError(Exception):
    """Base class for all nestbot errors."""


class ContextError(NestbotError, ValueError):
    """Context is malformed or not JSON-serializable."""


class SessionNotFoundError(NestbotError, KeyError):
    """Session id is not known to the SessionStore."""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class UnknownActionError(NestbotError):
    """One or more action names are not registered."""

    def __init__(self, names: list[str]):
        self.names = list(names)
        super().__init__(f"Unknown action(s): {', '.join(self.names)}")


class FetcherError(NestbotError):
    """An external data provider call failed or returned unusable data."""


class FeedExhaustedError(FetcherError):
    """A ranked feed was read past its last item."""


class EngineError(NestbotError):
    """The dialogue engine returned an error or an unusable step."""


class DeliveryError(NestbotError):
    """The messaging platform rejected or failed a send."""


class SignatureError(NestbotError):
    """Webhook request signature did not verify."""


class TurnError(NestbotError):
    """A conversation turn failed; the session context was left unchanged."""

    def __init__(self, session_id: str, cause: Exception):
        self.session_id = session_id
        self.cause = cause
        super().__init__(f"Turn failed for session {session_id}: {cause}")
