"""
Error taxonomy for store operations

Every error except PersistenceError is a user-facing validation outcome:
the operation had no side effect and the caller relays the message.
"""


class StoreError(Exception):
    """Base class; status_code is used by the HTTP layer"""
    status_code = 400


class DuplicateKeyError(StoreError):
    status_code = 409


class UnknownTeamError(StoreError):
    status_code = 404


class UnknownGameError(StoreError):
    status_code = 404


class UnknownGlobalBetError(StoreError):
    status_code = 404


class InvalidTimestampError(StoreError):
    status_code = 400


class BettingClosedError(StoreError):
    status_code = 409


class PersistenceError(StoreError):
    """Snapshot write failed; in-memory state is ahead of the file"""
    status_code = 500
