"""Error taxonomy for MediaMuse.

Every error is terminal for the operation that raised it. Controllers turn
them into the Error status plus a short message; none of them is retried.
"""


class MediaMuseError(Exception):
    """Base class for all MediaMuse errors."""

    user_message = "Something went wrong. Please try again."


class EncodingError(MediaMuseError):
    """A local file or blob could not be read or encoded."""

    user_message = "Could not read the selected media."


class MicrophonePermissionError(MediaMuseError, PermissionError):
    """Microphone access was denied or the device could not be opened."""

    user_message = "Could not access microphone."


class RemoteCallError(MediaMuseError):
    """Transport or endpoint failure while calling the model.

    The underlying exception is available as ``cause`` and ``__cause__``.
    """

    user_message = "The model request failed. Please try again."

    def __init__(self, message: str, cause: BaseException = None):
        super().__init__(message)
        self.cause = cause


class GenerationError(MediaMuseError):
    """Well-formed model response that lacks the expected content."""

    user_message = "The model did not return an image."


class InvalidTransitionError(MediaMuseError):
    """A status change that the request state machine does not allow."""
