"""Exceptions shared by the provider-facing services."""


class ProviderError(RuntimeError):
    """A database or storage call failed. The message is the provider's raw error text."""


class StorageError(ProviderError):
    """The object store rejected a read or write."""
