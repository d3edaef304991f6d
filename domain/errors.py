class DomainError(ValueError):
    """Base class for recoverable ledger errors."""


class InvalidArgument(DomainError):
    pass


class DuplicateCategory(DomainError):
    pass


class CategoryNotFound(DomainError):
    pass


class SelfTransfer(DomainError):
    pass


class UnknownRecipient(DomainError):
    pass


class AuthenticationError(DomainError):
    pass
