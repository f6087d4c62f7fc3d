"""Exception types raised by VoiceTranslator."""


class VoiceTranslatorError(Exception):
    """Base class for all VoiceTranslator errors."""


class InvalidStateError(VoiceTranslatorError):
    """An operation was sequenced incorrectly by its caller.

    This is a programming error and must not be retried.
    """


class TranslationError(VoiceTranslatorError):
    """A translation backend failed to produce a translation."""


class ConfigurationError(VoiceTranslatorError):
    """Configuration could not be loaded or validated."""
