"""Transaction lifecycle exceptions."""

from .base import DomainException


class InvalidStateException(DomainException):
    """Raised when an operation requires a status the transaction is not in."""

    def __init__(self, transaction_id: str, current_status: str, operation: str):
        super().__init__(
            message=(
                f"Cannot {operation} transaction {transaction_id}: "
                f"status is {current_status}, expected pending"
            ),
            code="INVALID_STATE",
        )
        self.transaction_id = transaction_id
        self.current_status = current_status
        self.operation = operation
