"""
CharmVault Error Handling

All error codes and exception classes.

Every contract rule violation is a ContractRejection. The public validator
surface collapses rejections to a boolean; the strict validators raise them
so the reason can be logged or reported.
"""

from enum import IntEnum
from typing import Optional, Any


class ErrorCode(IntEnum):
    """Contract error codes."""

    # 1xxx - General errors
    UNKNOWN_ERROR = 1000
    INVALID_PARAMETER = 1001
    CONFIG_ERROR = 1002

    # 2xxx - Decoding errors
    MALFORMED_WITNESS = 2001
    INVALID_UTXO_ID = 2002
    PAYLOAD_DECODE_FAILED = 2003
    PUBLIC_INPUT_NOT_EMPTY = 2004

    # 3xxx - Beneficiary errors
    EMPTY_BENEFICIARIES = 3001
    INVALID_PERCENTAGE_SUM = 3002
    EMPTY_BENEFICIARY_ADDRESS = 3003

    # 4xxx - Contract structure errors
    INVALID_STATUS = 4001
    ZERO_TRIGGER_DELAY = 4002
    INVALID_STATUS_TRANSITION = 4003

    # 5xxx - Operation errors
    IDENTITY_MISMATCH = 5001
    UTXO_NOT_SPENT = 5002
    INVALID_CHARM_COUNT = 5003
    CHECKIN_HEIGHT_NOT_INCREASED = 5004
    CHECKIN_HEIGHT_DECREASED = 5005
    IMMUTABLE_FIELD_CHANGED = 5006
    BENEFICIARIES_CHANGED = 5007
    DEADLINE_NOT_REACHED = 5008
    PAYOUT_MISMATCH = 5009

    # 6xxx - Dispatch errors
    UNSUPPORTED_APP_TAG = 6001
    NO_OPERATION_MATCHED = 6002

    # 7xxx - Spell errors
    INVALID_SPELL = 7001


class CharmVaultError(Exception):
    """Base exception for all CharmVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for reports."""
        result = {
            "code": self.code.value,
            "name": self.code.name,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result


# ==============================================================================
# General Errors (1xxx)
# ==============================================================================

class InvalidParameterError(CharmVaultError):
    def __init__(self, param: str, message: str = ""):
        msg = f"Invalid parameter: {param}"
        if message:
            msg += f" - {message}"
        super().__init__(ErrorCode.INVALID_PARAMETER, msg, {"parameter": param})


class ConfigError(CharmVaultError):
    def __init__(self, problems: list):
        super().__init__(
            ErrorCode.CONFIG_ERROR,
            f"Invalid configuration: {'; '.join(problems)}",
            {"problems": list(problems)}
        )


class ContractRejection(CharmVaultError):
    """Base class for every reason a spend is rejected."""
    pass


# ==============================================================================
# Decoding Errors (2xxx)
# ==============================================================================

class MalformedWitnessError(ContractRejection):
    def __init__(self, message: str = "Witness data is malformed"):
        super().__init__(ErrorCode.MALFORMED_WITNESS, message)


class InvalidUtxoIdError(ContractRejection):
    def __init__(self, value: str, reason: str = ""):
        msg = f"Invalid UTXO id: {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(ErrorCode.INVALID_UTXO_ID, msg, {"value": value})


class PayloadDecodeError(ContractRejection):
    def __init__(self, message: str):
        super().__init__(ErrorCode.PAYLOAD_DECODE_FAILED, message)


class PublicInputNotEmptyError(ContractRejection):
    def __init__(self):
        super().__init__(
            ErrorCode.PUBLIC_INPUT_NOT_EMPTY,
            "Public input must be empty"
        )


# ==============================================================================
# Beneficiary Errors (3xxx)
# ==============================================================================

class EmptyBeneficiariesError(ContractRejection):
    def __init__(self):
        super().__init__(
            ErrorCode.EMPTY_BENEFICIARIES,
            "Beneficiary list is empty"
        )


class InvalidPercentageSumError(ContractRejection):
    def __init__(self, total: int, required: int):
        super().__init__(
            ErrorCode.INVALID_PERCENTAGE_SUM,
            f"Beneficiary percentages sum to {total}, expected {required}",
            {"total": total, "required": required}
        )


class EmptyBeneficiaryAddressError(ContractRejection):
    def __init__(self, index: int):
        super().__init__(
            ErrorCode.EMPTY_BENEFICIARY_ADDRESS,
            f"Beneficiary {index} has an empty address",
            {"index": index}
        )


# ==============================================================================
# Contract Structure Errors (4xxx)
# ==============================================================================

class InvalidStatusError(ContractRejection):
    def __init__(self, status: Any, allowed: list):
        names = ", ".join(str(s) for s in allowed)
        super().__init__(
            ErrorCode.INVALID_STATUS,
            f"Status {status} not allowed here (expected one of: {names})",
            {"status": str(status), "allowed": [str(s) for s in allowed]}
        )


class ZeroTriggerDelayError(ContractRejection):
    def __init__(self):
        super().__init__(
            ErrorCode.ZERO_TRIGGER_DELAY,
            "trigger_delay must be at least 1"
        )


class InvalidStatusTransitionError(ContractRejection):
    def __init__(self, current: Any, proposed: Any):
        super().__init__(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"Status cannot move from {current} to {proposed}",
            {"current": str(current), "proposed": str(proposed)}
        )


# ==============================================================================
# Operation Errors (5xxx)
# ==============================================================================

class IdentityMismatchError(ContractRejection):
    def __init__(self, expected: str, actual: str):
        super().__init__(
            ErrorCode.IDENTITY_MISMATCH,
            f"Witness hashes to {actual[:16]}..., app identity is {expected[:16]}...",
            {"expected": expected, "actual": actual}
        )


class UtxoNotSpentError(ContractRejection):
    def __init__(self, utxo_id: str):
        super().__init__(
            ErrorCode.UTXO_NOT_SPENT,
            f"Witness UTXO {utxo_id} is not spent by this transaction",
            {"utxo_id": utxo_id}
        )


class InvalidCharmCountError(ContractRejection):
    def __init__(self, side: str, count: int, expected: int):
        super().__init__(
            ErrorCode.INVALID_CHARM_COUNT,
            f"Expected {expected} {side} charm(s), found {count}",
            {"side": side, "count": count, "expected": expected}
        )


class CheckinHeightNotIncreasedError(ContractRejection):
    def __init__(self, previous: int, proposed: int):
        super().__init__(
            ErrorCode.CHECKIN_HEIGHT_NOT_INCREASED,
            f"Check-in height must increase: {proposed} <= {previous}",
            {"previous": previous, "proposed": proposed}
        )


class CheckinHeightDecreasedError(ContractRejection):
    def __init__(self, previous: int, proposed: int):
        super().__init__(
            ErrorCode.CHECKIN_HEIGHT_DECREASED,
            f"Check-in height must not decrease: {proposed} < {previous}",
            {"previous": previous, "proposed": proposed}
        )


class ImmutableFieldChangedError(ContractRejection):
    def __init__(self, field_name: str):
        super().__init__(
            ErrorCode.IMMUTABLE_FIELD_CHANGED,
            f"Field {field_name} must not change",
            {"field": field_name}
        )


class BeneficiariesChangedError(ContractRejection):
    def __init__(self):
        super().__init__(
            ErrorCode.BENEFICIARIES_CHANGED,
            "Beneficiary list must not change during check-in"
        )


class DeadlineNotReachedError(ContractRejection):
    def __init__(self, current_height: int, deadline: int):
        super().__init__(
            ErrorCode.DEADLINE_NOT_REACHED,
            f"Deadline not reached: current height {current_height}, deadline {deadline}",
            {"current_height": current_height, "deadline": deadline}
        )


class PayoutMismatchError(ContractRejection):
    def __init__(self, address: str, paid: int, expected: int):
        super().__init__(
            ErrorCode.PAYOUT_MISMATCH,
            f"Beneficiary {address} paid {paid} sats, expected at least {expected}",
            {"address": address, "paid": paid, "expected": expected}
        )


# ==============================================================================
# Dispatch Errors (6xxx)
# ==============================================================================

class UnsupportedAppTagError(ContractRejection):
    def __init__(self, tag: str):
        super().__init__(
            ErrorCode.UNSUPPORTED_APP_TAG,
            f"Unsupported app tag: {tag!r}",
            {"tag": tag}
        )


class NoOperationMatchedError(ContractRejection):
    def __init__(self, reasons: dict):
        super().__init__(
            ErrorCode.NO_OPERATION_MATCHED,
            "No contract operation accepts this transaction",
            {"reasons": dict(reasons)}
        )


# ==============================================================================
# Spell Errors (7xxx)
# ==============================================================================

class InvalidSpellError(CharmVaultError):
    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_SPELL, f"Invalid spell: {message}")
