class LedgerError(Exception):
    """
    Base class for every precondition failure raised by the ledger core.

    `code` is the stable name surfaced to callers, `status_code` is what the
    HTTP layer answers with. None of these are retried inside the core.
    """

    code = "LedgerError"
    status_code = 400
    message = "Ledger operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class GroupNotFound(LedgerError):
    code = "GroupNotFound"
    status_code = 404
    message = "Group does not exist"


class ExpenseNotFound(LedgerError):
    code = "ExpenseNotFound"
    status_code = 404
    message = "Expense not found"


class AlreadyMember(LedgerError):
    code = "AlreadyMember"
    status_code = 409
    message = "User is already a member"


class NotAMember(LedgerError):
    code = "NotAMember"
    status_code = 403
    message = "Caller is not a member of the group"


class EmptyGroup(LedgerError):
    code = "EmptyGroup"
    message = "Group has no members"


class PayerNotMember(LedgerError):
    code = "PayerNotMember"
    status_code = 403
    message = "Payer is not a member"


class DebtorNotMember(LedgerError):
    code = "DebtorNotMember"
    message = "A debtor is not a member"


class AmountMismatch(LedgerError):
    code = "AmountMismatch"
    message = "Sum of amounts must equal total"


class InvalidPercentageSum(LedgerError):
    code = "InvalidPercentageSum"
    message = "Percentages must sum to 100"


class InvalidSplit(LedgerError):
    code = "InvalidSplit"
    message = "Split input is malformed"


class NoNegativeBalance(LedgerError):
    code = "NoNegativeBalance"
    message = "You do not have a negative balance"


class NotACreditor(LedgerError):
    code = "NotACreditor"
    message = "The specified user is not a creditor"


class NothingToSettle(LedgerError):
    code = "NothingToSettle"
    message = "Nothing to settle"


class ExternalTransferFailed(LedgerError):
    code = "ExternalTransferFailed"
    status_code = 502
    message = "Payment transfer failed"


class InvalidIdentity(LedgerError):
    code = "InvalidIdentity"
    message = "A non-empty identity is required"
