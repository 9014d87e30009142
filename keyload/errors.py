"""
keyload.errors
--------------
Exception hierarchy for the loader.

Fatal conditions (UsageError, ParseError, StorageConnectionError, PeerError)
stop the process. The rest are logged by the load loop, which then moves on
to the next pattern, record or file.
"""


class KeyloadError(Exception):
    pass


class UsageError(KeyloadError):
    pass


class ParseError(KeyloadError):
    pass


class PatternError(KeyloadError):
    pass


class KeyDecodeError(KeyloadError):
    pass


class StorageError(KeyloadError):
    pass


class StorageConnectionError(StorageError, ConnectionError):
    pass


class PeerError(KeyloadError):
    pass
