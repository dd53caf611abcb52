"""Error taxonomy for the workout core.

Services raise these; ``app.main`` turns them into JSON responses with the
status code carried by each class.
"""


class WorkoutError(Exception):
    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(WorkoutError):
    """Template, session, exercise index or set index does not exist."""

    status_code = 404


class ValidationFailed(WorkoutError):
    """A template breaks a structural invariant; nothing was written."""

    status_code = 422


class Unresolvable(WorkoutError):
    """No user identity and no anonymous key where one is required."""

    status_code = 400


class SessionClosed(WorkoutError):
    """Mutation attempted on a session that is already completed."""

    status_code = 409


class ConcurrentUpdate(WorkoutError):
    """The session document changed between read and write."""

    status_code = 409
