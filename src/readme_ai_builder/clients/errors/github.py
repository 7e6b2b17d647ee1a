ExtraInfoType = dict[str, str | None]


class ClientError(Exception):
    """A request error from the README Builder GitHub client."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class RequestError(ClientError):
    """A request error from the README Builder GitHub client."""

    status_code: int | None

    def __init__(
        self, action: str, message: str | None = None, extra_info: ExtraInfoType | None = None, status_code: int | None = None
    ):
        if not extra_info:
            extra_info = {}
        self.status_code = status_code
        super().__init__(message="A request error occured.", extra_info={"action": action, "message": message, **extra_info})


class ResourceNotFoundError(RequestError):
    """A not found error from the README Builder GitHub client."""

    def __init__(self, action: str, resource: str | None = None, extra_info: ExtraInfoType | None = None):
        if not extra_info:
            extra_info = {}
        super().__init__(
            action=action,
            message="The resource could not be found.",
            extra_info={"resource": resource, **extra_info},
            status_code=404,
        )


class AuthenticationFailedError(RequestError):
    """The credential was rejected by GitHub (401) or lacks access to the resource (403)."""

    def __init__(self, action: str, status_code: int, message: str | None = None):
        super().__init__(action=action, message=message or "The credential was rejected.", status_code=status_code)


class ResourceConflictError(RequestError):
    """GitHub rejected a write because the supplied revision is no longer current."""

    def __init__(self, action: str, resource: str | None = None, message: str | None = None):
        super().__init__(action=action, message=message, extra_info={"resource": resource}, status_code=409)


class ResourceTypeMismatchError(RequestError):
    """A type mismatch error from the README Builder GitHub client."""

    def __init__(self, action: str, resource: str, expected_type: type, actual_type: type):
        super().__init__(action, f"{resource}: Expected {expected_type}, got {actual_type}")
