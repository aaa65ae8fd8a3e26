"""Relay exception types."""


class RelayError(Exception):
    """Base class for relay collaborator failures."""


class TranslationError(RelayError):
    """The translation provider failed or timed out for one target."""


class TransportError(RelayError):
    """The chat platform rejected or failed a send, fetch or react call."""
