from enum import Enum

class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class FilterMode(str, Enum):
    ALL = "all"
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected" # Rejected, or from an email with no approved submission

class SessionStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"

class GateDecision(Enum):
    FETCH = "fetch"
    WAIT = "wait" # Render nothing and do not fetch yet
    REDIRECT = "redirect"
