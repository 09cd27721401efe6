from translate_bot.clients.errors.base import ClientError, ExtraInfoType, RequestError


class AuthenticationError(ClientError):
    """Google credentials could not be loaded or refreshed."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        super().__init__(message=f"Google Cloud authentication failed: {message}", extra_info=extra_info)


class TranslationCountMismatchError(RequestError):
    """The Translation API returned a different number of translations than texts sent."""

    def __init__(self, action: str, requested: int, received: int):
        super().__init__(
            action=action,
            message="The number of translations does not match the number of texts sent.",
            extra_info={"requested": str(requested), "received": str(received)},
        )
