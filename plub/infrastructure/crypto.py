"""Email Cipher - symmetric encryption of the JWT subject.

Invariants:
    - Tokens never carry a plaintext email; the subject is a Fernet token
    - Decryption failures map to PlubError(DECRYPTION_FAILURE)
"""

import logging

from cryptography.fernet import Fernet, InvalidToken

from plub.core.errors import ErrorKind, PlubError

logger = logging.getLogger(__name__)


class EmailCipher:
    """Fernet wrapper for encrypting and decrypting account emails."""

    def __init__(self, key: str):
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid encryption key: {e}")
            raise PlubError(ErrorKind.ENCRYPTION_FAILURE)

    def encrypt(self, plain: str) -> str:
        return self._fernet.encrypt(plain.encode()).decode()

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except (InvalidToken, ValueError, TypeError):
            raise PlubError(ErrorKind.DECRYPTION_FAILURE)
