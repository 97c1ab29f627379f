"""Application errors.

Every error carries a human-readable message and the HTTP status it maps to.
There are no numeric error codes beyond the HTTP status; the response
envelope echoes the status in its `code` field.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.message = message
        self.http_status = http_status
        super().__init__(message)

    @property
    def code(self) -> int:
        return self.http_status


# --- 404: missing entities / empty results ---

class AccountNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__("Conta não encontrada.", 404)


class NoAccountsFoundError(AppError):
    """A filtered listing or aggregate came back empty."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


# --- 400: malformed input / invalid transitions ---

class AccountIdMismatchError(AppError):
    def __init__(self, path_id: str, body_id: str) -> None:
        super().__init__(
            f"O id da rota ({path_id}) difere do id do corpo ({body_id}).", 400
        )


class EmptyYearListError(AppError):
    def __init__(self) -> None:
        super().__init__(
            "Informe pelo menos um ano. "
            "Exemplo: /api/v1/accounts/totals-by-year?years=2024&years=2025",
            400,
        )


class AccountAlreadyActiveError(AppError):
    def __init__(self) -> None:
        super().__init__("A conta já está ativa.", 400)


class AccountAlreadyInactiveError(AppError):
    def __init__(self) -> None:
        super().__init__("A conta já está inativa.", 400)


class AccountNotDeletedError(AppError):
    def __init__(self) -> None:
        super().__init__("A conta não está marcada como deletada.", 400)


# --- 500: fatal ---

class ConcurrencyConflictError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(
            f"Conflito de concorrência ao salvar a conta {account_id}.", 500
        )


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(detail, 500)
