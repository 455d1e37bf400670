class DomainError(Exception):
    """Base class for business rule failures."""


class InvalidEmailError(DomainError):
    pass


class DuplicateUserError(DomainError):
    pass
