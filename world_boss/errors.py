"""Exception types raised by the World Boss client."""


class WorldBossError(Exception):
    """Base class for all client errors."""


class WalletUnavailable(WorldBossError):
    """No wallet transport or signer is available."""


class TransactionRejected(WorldBossError):
    """The signer declined the transaction."""


class ContractReverted(WorldBossError):
    """A contract precondition failed on chain."""

    def __init__(self, kind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class NetworkError(WorldBossError):
    """The RPC endpoint could not complete a request."""


class QueryFailed(WorldBossError):
    """A read-only contract call could not complete."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class ConfigurationMissing(WorldBossError):
    """No usable contract address configuration was found."""
