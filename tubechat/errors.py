class TubechatError(Exception):
    """Common base for every error raised by tubechat."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        full_msg = message
        if cause:
            full_msg += f" (cause: {cause.__class__.__name__}: {cause})"
        super().__init__(full_msg)


class InvalidArgument(TubechatError, ValueError):
    pass


class UnknownTool(TubechatError, LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ProviderError(TubechatError):
    """A call to the YouTube Data API failed."""

    def __init__(self, message: str, cause: Exception | None = None, status: int | None = None):
        self.status = status
        super().__init__(message, cause)


class AccountNotConfigured(ProviderError):
    pass


class UpstreamError(TubechatError):
    """A call to the completion provider failed."""

    def __init__(self, message: str, cause: Exception | None = None, status: int | None = None):
        self.status = status
        super().__init__(message, cause)


class ChatError(TubechatError):
    pass
