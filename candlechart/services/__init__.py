"""
Candle Chart Services

Service layer containing the indicator computation logic.
Each service has a defined interface (contract) and implementation.
"""

from candlechart.services.base import (
    BaseService,
    DataIntegrityError,
    ServiceError,
    StoreError,
    ValidationError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "ValidationError",
    "StoreError",
    "DataIntegrityError",
]
