"""
Exceptions raised by the suppression engine.

Rule evaluation itself never fails; these cover broken configuration and
host integration bugs, which should surface before or at the first call.
"""

from typing import Optional


class SuppressEngineError(Exception):
    """Base exception for suppression engine errors."""
    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class RuleConfigurationError(SuppressEngineError):
    """Rule file is missing, unreadable, or malformed."""
    pass


class InvalidClassRecordError(SuppressEngineError):
    """Handler was given something that is not a class-like record."""
    pass


class ClassDescriptionError(SuppressEngineError):
    """Entry in a class description file cannot be turned into a record."""
    pass
