class MarketplaceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    status_code = 404


class ConflictError(MarketplaceError):
    status_code = 409


class AuthError(MarketplaceError):
    """Auth failure reported as ``{code, message}`` like common auth providers do."""

    def __init__(self, code: str, message: str, status_code: int):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


def email_in_use() -> AuthError:
    return AuthError("auth/email-already-in-use", "Email already in use", 400)


def invalid_credentials() -> AuthError:
    return AuthError("auth/invalid-credential", "Invalid credentials", 401)
