from starlette import status


class PlaceHubError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(PlaceHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid data"

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(PlaceHubError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ForbiddenError(PlaceHubError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Unauthorized"
