from enum import Enum


class VehicleType(str, Enum):
    motor_car = "motor_car"
    motorcycle = "motorcycle"
    bicycle = "bicycle"


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class Direction(str, Enum):
    sale = "sale"
    purchase = "purchase"


class CounterpartyLocation(str, Enum):
    eu = "eu"
    gb = "gb"
    ni = "ni"
    non_eu = "non_eu"


class SupplyType(str, Enum):
    goods = "goods"
    services = "services"


class CustomerType(str, Enum):
    b2b = "b2b"
    b2c = "b2c"


class VATTreatment(str, Enum):
    zero_rated = "zero_rated"
    oss_destination = "oss_destination"
    standard_rated = "standard_rated"
    reverse_charge = "reverse_charge"
    self_accounting = "self_accounting"
    postponed_accounting = "postponed_accounting"


class MaritalStatus(str, Enum):
    single = "single"
    married = "married"
    civil_partner = "civil_partner"
    widowed = "widowed"
    separated = "separated"


class AssessmentBasis(str, Enum):
    single = "single"
    joint = "joint"
    separate = "separate"
