"""Domain-specific exceptions"""


class WalletError(Exception):
    """Base exception for wallet operations"""

    code = "wallet_error"
    retryable = False


class InvalidAmount(WalletError):
    """Amount is non-positive or exceeds the available balance"""

    code = "invalid_amount"


class InvalidRecipient(WalletError):
    """Payout destination is not a valid 10-digit MoMo number"""

    code = "invalid_recipient"


class RateUnavailable(WalletError):
    """No usable USD to GHS exchange rate"""

    code = "rate_unavailable"
    retryable = True


class WithdrawalDeclined(WalletError):
    """Payout gateway rejected the withdrawal"""

    code = "withdrawal_declined"


class StorageConflict(WalletError):
    """Profile changed concurrently between read and conditional write"""

    code = "storage_conflict"
    retryable = True


class StorageUnavailable(WalletError):
    """Transient database failure"""

    code = "storage_unavailable"
    retryable = True


class ProfileNotFound(WalletError):
    code = "profile_not_found"


class TransactionNotFound(WalletError):
    code = "transaction_not_found"


class InvalidGoals(WalletError):
    """Goal ladder has blank or duplicate names, or negative targets"""

    code = "invalid_goals"


class PayoutGatewayError(Exception):
    """Payout gateway returned an error or could not be reached"""

    pass


class PayoutOutcomeUnknown(PayoutGatewayError):
    """Payout call timed out; the gateway may or may not have paid"""

    pass
