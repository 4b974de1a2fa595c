"""Syntactic checks on a raw name before anything is sent to the model.

The same function backs the server endpoint and :class:`chinese_namer.client.ClientSession`,
so both sides apply identical rules. The client check is advisory; the server
always re-validates.
"""
import re
from typing import Any

from .models import NameCandidate

MAX_NAME_LENGTH = 50
NAME_PATTERN = re.compile(r"[A-Za-z\s\-']+")


class NameValidationError(ValueError):
    """Base class for client-correctable input errors (HTTP 400)."""
    message = "Please provide a valid English name"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class EmptyName(NameValidationError):
    message = "English name cannot be empty"


class TooLong(NameValidationError):
    message = f"English name cannot exceed {MAX_NAME_LENGTH} characters"


class InvalidCharacters(NameValidationError):
    message = "English name may only contain letters, spaces, hyphens and apostrophes"


def validate_name(raw: Any) -> NameCandidate:
    """Return the trimmed name, or raise a NameValidationError subclass."""
    if raw is None or not isinstance(raw, str):
        raise EmptyName(NameValidationError.message)

    trimmed = raw.strip()
    if not trimmed:
        raise EmptyName()
    if len(trimmed) > MAX_NAME_LENGTH:
        raise TooLong()
    if not NAME_PATTERN.fullmatch(trimmed):
        raise InvalidCharacters()
    return NameCandidate(trimmed)
