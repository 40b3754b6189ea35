"""Common application-wide constants."""

DEFAULT_PAYMENT_STATUS = "pending"

# Who moved a booking into ``cancelled`` when it was not staff
CUSTOMER_ACTOR = "customer"

# How many outbox rows one dispatch run picks up
OUTBOX_BATCH_SIZE = 50


__all__ = [
    "DEFAULT_PAYMENT_STATUS",
    "CUSTOMER_ACTOR",
    "OUTBOX_BATCH_SIZE",
]
