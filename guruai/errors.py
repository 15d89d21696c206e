"""Failure taxonomy shared by the orchestrators and the HTTP layer.

Every class carries the HTTP status it maps to and the message a student sees.
"""


class GuruError(Exception):
    status_code = 500
    user_message = "Something went wrong. Please try again."

    def __init__(self, message=None):
        super().__init__(message or self.user_message)


class NetworkFailure(GuruError):
    status_code = 503
    user_message = "Could not reach the AI service. Check your connection and try again."


class ProviderError(GuruError):
    status_code = 502
    user_message = "The AI service returned an error. Please try again."


class AuthenticationError(ProviderError):
    status_code = 503
    user_message = "AI Model unavailable"


class QuotaExceeded(ProviderError):
    status_code = 429
    user_message = "Quota Exceeded. Please wait a moment."


class MalformedResponse(GuruError):
    status_code = 502
    user_message = "The AI service sent a reply we could not read. Please try again."


class MalformedQuizError(MalformedResponse):
    user_message = "Failed to generate quiz. Try again!"


class QuizGenerationFailed(GuruError):
    status_code = 502
    user_message = "Failed to generate quiz. Try again!"


class UserInputInvalid(GuruError):
    status_code = 400
    user_message = "Please check your input and try again."


class ResourceUnavailable(GuruError):
    status_code = 409
    user_message = "The camera is not available right now."


class CameraBusy(ResourceUnavailable):
    user_message = "The camera is already open."


class CameraPermissionDenied(ResourceUnavailable):
    status_code = 403
    user_message = "Could not access camera"


class RequestInProgress(GuruError):
    status_code = 409
    user_message = "Please wait for the current request to finish."


class ViewClosed(GuruError):
    status_code = 409
    user_message = "This screen was closed before the reply arrived."


class ViewNotActive(GuruError):
    status_code = 409
    user_message = "Open this screen before using it."


class SessionNotFound(GuruError):
    status_code = 401
    user_message = "Please log in first."
