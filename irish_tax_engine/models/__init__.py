from .enums import (
    VehicleType,
    TransactionType,
    Direction,
    CounterpartyLocation,
    SupplyType,
    CustomerType,
    VATTreatment,
    MaritalStatus,
    AssessmentBasis,
)
from .transactions import TransactionRecord

__all__ = [
    'VehicleType',
    'TransactionType',
    'Direction',
    'CounterpartyLocation',
    'SupplyType',
    'CustomerType',
    'VATTreatment',
    'MaritalStatus',
    'AssessmentBasis',
    'TransactionRecord',
]
