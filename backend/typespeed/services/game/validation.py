import re
from dataclasses import dataclass
from typing import Optional

from typespeed.errors import UserInputError

MIN_LENGTH = 2
MAX_LENGTH = 50

_ALPHABETIC = re.compile(r'^[A-Za-z]+$')

MESSAGES = {
    'empty': 'Input cannot be empty. Please type a word.',
    'non-alphabetic': 'Input must contain only alphabetic characters (A-Z, a-z).',
    'length': f'Input must be between {MIN_LENGTH} and {MAX_LENGTH} characters long.',
}


@dataclass(frozen=True)
class InputCheck:
    valid: bool
    reason: Optional[str] = None
    message: str = 'Input is valid.'


def validate_input(raw: Optional[str]) -> InputCheck:
    """Gate an answer attempt. Says nothing about whether it matches the word."""
    text = (raw or '').strip()
    if not text:
        return InputCheck(False, 'empty', MESSAGES['empty'])
    if not _ALPHABETIC.match(text):
        return InputCheck(False, 'non-alphabetic', MESSAGES['non-alphabetic'])
    if not MIN_LENGTH <= len(text) <= MAX_LENGTH:
        return InputCheck(False, 'length', MESSAGES['length'])
    return InputCheck(True)


def check_input(raw: Optional[str]) -> str:
    """Return the trimmed answer, or raise UserInputError."""
    result = validate_input(raw)
    if not result.valid:
        raise UserInputError(result.reason, result.message)
    return (raw or '').strip()
