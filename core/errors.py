"""Error kinds raised by the auction circuit."""


class AuctionError(Exception):
    """Base class for all auction circuit errors."""


class ConfigurationError(AuctionError, ValueError):
    """Bad configuration or misuse of the circuit lifecycle.

    Always raised before any gate is evaluated.
    """


class BackendError(AuctionError, RuntimeError):
    """A gate evaluation in the homomorphic backend failed.

    The circuit does not retry: the instance must be discarded and the
    auction re-run from fresh bids.
    """
