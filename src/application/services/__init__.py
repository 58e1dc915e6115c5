from .ipo_credentials_provider import IpoCredentialsProvider
from .secret_resolver import SecretResolver

__all__ = [
    "IpoCredentialsProvider",
    "SecretResolver",
]
