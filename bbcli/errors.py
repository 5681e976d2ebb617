"""Error kinds raised by bb.

Every failure a command can report derives from BbError. The CLI entry
point prints ``str(error)`` after the error glyph and ``error.hint`` (when
set) on the next line, then exits non-zero.
"""

REPO_HINT = "Use --repo WORKSPACE/REPO to specify"
LOGIN_HINT = "Set BB_TOKEN or store a token for bitbucket.org in the system keyring"


class BbError(Exception):
    """Base class for all bb errors."""

    default_hint: str | None = None

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint if hint is not None else self.default_hint


# Input validation


class InputError(BbError):
    """Invalid user input."""

    pass


class MalformedRepoFlagError(InputError):
    """--repo value is not WORKSPACE/REPO."""

    pass


class MalformedURLError(InputError):
    """Remote URL is not a recognised Bitbucket URL."""

    pass


class UnrecognizedURLError(InputError):
    """Bitbucket URL does not point at a pull request."""

    pass


class InvalidPRNumberError(InputError):
    """Pull request number is not a positive integer."""

    pass


class InvalidStateError(InputError):
    """Unknown pull request state filter."""

    pass


class ConfigError(BbError):
    """Config file could not be read, parsed or validated."""

    pass


# Working copy


class WorkingCopyError(BbError):
    """Failure while inspecting or changing the local checkout."""

    pass


class NotAWorkingCopyError(WorkingCopyError):
    """Current directory is not inside a git working copy."""

    pass


class NoServiceRemoteError(WorkingCopyError):
    """No remote of the working copy points at Bitbucket."""

    pass


class DetachedHeadError(WorkingCopyError):
    """HEAD does not point at a branch."""

    pass


class GitRunnerError(WorkingCopyError):
    """Raised when a git command fails."""

    pass


# Authentication


class AuthError(BbError):
    """No usable credential."""

    default_hint = LOGIN_HINT


class NotLoggedInError(AuthError):
    """No token in the environment or the credential store."""

    pass


class CredentialStoreUnavailableError(AuthError):
    """OS credential store could not be queried."""

    pass


# Remote API


class ApiError(BbError):
    """Request to the Bitbucket API failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.detail = detail


class BadRequestError(ApiError):
    """HTTP 400."""

    pass


class UnauthorizedError(ApiError):
    """HTTP 401 or 403."""

    default_hint = "Check that your token is valid and has the required scopes. " + LOGIN_HINT


class NotFoundError(ApiError):
    """HTTP 404."""

    pass


class ConflictError(ApiError):
    """Resource already exists or is not in the expected state."""

    pass


class RateLimitedError(ApiError):
    """HTTP 429; retry_after is the server's Retry-After value in seconds."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(ApiError):
    """HTTP 5xx."""

    pass


class NetworkError(ApiError):
    """Transport failure or timeout."""

    pass


class MalformedResponseError(ApiError):
    """Response body does not match the expected schema."""

    pass


# Operations


class OperationError(BbError):
    """A command refused to proceed."""

    pass


class MergeStateInvalidError(OperationError):
    """Pull request is not open."""

    pass


class PullRequestStateError(OperationError):
    """Pull request is not in the state the operation requires."""

    pass


class NothingToEditError(OperationError):
    """Edit called without any field to change."""

    pass


class NoPRForCurrentBranchError(OperationError):
    """No open pull request has the given source branch."""

    pass


class MergeCancelledError(OperationError):
    """Merge was not confirmed."""

    pass


class CancelledError(OperationError):
    """User declined a confirmation prompt."""

    pass


class NonInteractiveError(OperationError):
    """Confirmation or input required but stdin is not a terminal."""

    pass


# External tools


class ExternalToolError(BbError):
    """Editor or browser could not be run."""

    pass
