class CardFlipError(Exception):
    """Base class for errors raised by the card flip game."""


class ValidationError(CardFlipError):
    """Bad user input; the action is rejected and no state changes."""


class NetworkError(CardFlipError):
    """A score store or hint request failed. Never fatal to a round."""


class ConfigurationError(CardFlipError):
    """An optional endpoint is missing; the feature is disabled instead."""
