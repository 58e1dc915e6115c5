"""Contract for decrypting stored appliance passwords."""

from abc import ABC, abstractmethod

from domain.value_object.ipo_server_config import EncryptedSecret


class SecretResolver(ABC):
    """Turns an encrypted password envelope back into the plain password.

    Implementations own the key material; the plain value must only live for
    the duration of one appliance operation.
    """

    @abstractmethod
    def decrypt(self, secret: EncryptedSecret) -> str:
        """Decrypt a stored secret.

        Raises:
            ValueError: When the envelope cannot be authenticated or decrypted
        """
