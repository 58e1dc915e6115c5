from .ipo import IpoAppStatus, IpoEnvelopeFormat, IpoRecordKind

__all__ = [
    "IpoAppStatus",
    "IpoEnvelopeFormat",
    "IpoRecordKind",
]  # Re-export enums (prevents flake8 F401 unused import warnings)
