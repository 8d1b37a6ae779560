# app/core/errors.py
"""Domain exceptions raised by services and mapped to HTTP by the API layer."""


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400


class AuthError(DomainError):
    status_code = 401


class NotFoundError(DomainError):
    status_code = 404


class BusinessError(DomainError):
    status_code = 409


class PersistenceError(DomainError):
    status_code = 500
