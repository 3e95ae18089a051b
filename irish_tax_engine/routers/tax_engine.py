"""
Irish Tax Engine - Tax API Router

REST endpoints for the Irish tax calculators:
- Revenue mileage & subsistence rates
- Motor vehicle capital allowances
- Form 11 relief scanning
- Cross-border VAT, VAT number formats, import VAT, OSS / Intrastat
- VAT & CT deductibility
- Form 11 income tax
- CT1 corporation tax and trial balance

All endpoints are stateless and return deterministic JSON.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from irish_tax_engine.config import get_settings
from irish_tax_engine.models.transactions import TransactionRecord
from irish_tax_engine.services.account_mapping import get_account_suggestion
from irish_tax_engine.services.ct1_computation import CT1Questionnaire, compute_ct1
from irish_tax_engine.services.cross_border_vat import (
    CrossBorderVATQuery,
    calculate_import_vat,
    check_intrastat_threshold,
    check_oss_threshold,
    determine_cross_border_vat,
    validate_eu_vat_format,
)
from irish_tax_engine.services.engine_status import get_tax_engine_status
from irish_tax_engine.services.eu_vat_rules import DEFAULT_IMPORT_VAT_RATE, get_eu_vat_reference
from irish_tax_engine.services.form11_calculator import (
    Form11Input,
    calculate_form11,
    calculate_vehicle_bik,
    get_tax_constants,
)
from irish_tax_engine.services.relief_scanner import scan_for_reliefs
from irish_tax_engine.services.revenue_rates import (
    calculate_annual_commute_mileage,
    calculate_mileage_allowance,
    calculate_subsistence_allowance,
    get_revenue_rates,
    mileage_band_breakdown,
)
from irish_tax_engine.services.trial_balance import build_trial_balance
from irish_tax_engine.services.vat_deductibility import (
    calculate_vat_from_gross,
    is_ct_deductible,
    is_vat_deductible,
    vat_rate_table,
)
from irish_tax_engine.services.vehicle_depreciation import (
    VehicleAsset,
    build_depreciation_schedule,
    calculate_vehicle_depreciation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tax", tags=["Tax Engine"])


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _tax_year(requested: Optional[int]) -> int:
    return requested or get_settings().DEFAULT_TAX_YEAR


# ==================== SHARED MODELS ====================

class TransactionIn(BaseModel):
    """A bank transaction as imported from a statement."""
    description: str = Field(default="", description="Bank narrative")
    amount: float = Field(..., description="Amount (sign is ignored)")
    transaction_date: Optional[str] = Field(default=None, description="Transaction date (YYYY-MM-DD)")
    type: str = Field(default="", description="income or expense; other values are ignored by the scanners")
    category: Optional[str] = Field(default=None, description="Category name, if categorised")

    def to_record(self) -> TransactionRecord:
        return TransactionRecord.from_dict(self.model_dump())


class VehicleIn(BaseModel):
    description: str = Field(default="Motor Vehicle", description="Vehicle description")
    reg: str = Field(default="", description="Registration number")
    purchase_cost: float = Field(..., ge=0, description="Purchase cost excluding VAT")
    date_acquired: Optional[str] = Field(default=None, description="Acquisition date (YYYY-MM-DD)")
    business_use_pct: float = Field(default=100, description="Business use %, clamped to 0-100 for the allowance")

    def to_asset(self) -> VehicleAsset:
        return VehicleAsset(**self.model_dump())


# ==================== REQUEST MODELS ====================

class MileageRequest(BaseModel):
    """Request model for mileage allowance."""
    distance_km: float = Field(..., description="Business kilometres travelled in the year")
    vehicle_type: str = Field(default="motor_car", description="motor_car, motorcycle, bicycle")

    class Config:
        json_schema_extra = {"example": {"distance_km": 8000, "vehicle_type": "motor_car"}}


class CommuteRequest(BaseModel):
    one_way_km: float = Field(..., description="One-way distance in km")
    working_days_per_year: Optional[int] = Field(default=None, ge=1, le=366, description="Working days")


class SubsistenceRequest(BaseModel):
    nights_away: int = Field(default=0, description="Overnight stays")
    days_away: int = Field(default=0, description="Days away (10+ hours)")

    class Config:
        json_schema_extra = {"example": {"nights_away": 2, "days_away": 3}}


class VehicleDepreciationRequest(BaseModel):
    """Request model for motor vehicle capital allowances."""
    vehicle: VehicleIn
    tax_year: Optional[int] = Field(default=None, ge=2000, le=2100, description="Tax year")
    include_schedule: bool = Field(default=False, description="Include the full 8-year schedule")

    class Config:
        json_schema_extra = {
            "example": {
                "vehicle": {
                    "description": "Toyota Corolla",
                    "reg": "231-D-12345",
                    "purchase_cost": 30000,
                    "date_acquired": "2023-03-01",
                    "business_use_pct": 80,
                },
                "tax_year": 2025,
            }
        }


class ReliefScanRequest(BaseModel):
    transactions: List[TransactionIn] = Field(default_factory=list, description="Personal account transactions")


class CrossBorderVATRequest(BaseModel):
    """Request model for cross-border VAT treatment."""
    direction: str = Field(..., description="sale or purchase")
    counterparty_location: str = Field(..., description="eu, gb, ni, non_eu")
    supply_type: str = Field(..., description="goods or services")
    customer_type: str = Field(default="b2b", description="b2b or b2c")

    class Config:
        json_schema_extra = {
            "example": {
                "direction": "sale",
                "counterparty_location": "eu",
                "supply_type": "goods",
                "customer_type": "b2b",
            }
        }


class VATNumberRequest(BaseModel):
    vat_number: str = Field(..., description="VAT number, with or without prefix")
    country_code: str = Field(..., min_length=2, max_length=2, description="ISO country code")


class ImportVATRequest(BaseModel):
    cif_value: float = Field(..., ge=0, description="Cost, insurance and freight value")
    customs_duty: float = Field(default=0, ge=0)
    excise_duty: float = Field(default=0, ge=0)
    vat_rate: float = Field(default=float(DEFAULT_IMPORT_VAT_RATE), ge=0, le=1, description="Rate as a fraction")


class OSSThresholdRequest(BaseModel):
    annual_eu_b2c_sales: float = Field(..., ge=0, description="Cross-border B2C sales to EU consumers")


class IntrastatThresholdRequest(BaseModel):
    arrivals_total: float = Field(default=0, ge=0)
    dispatches_total: float = Field(default=0, ge=0)


class DeductibilityRequest(BaseModel):
    description: str = Field(..., description="Transaction description")
    category: Optional[str] = Field(default=None)
    account: Optional[str] = Field(default=None)


class VATFromGrossRequest(BaseModel):
    gross_amount: float = Field(..., description="VAT-inclusive amount")
    vat_rate: Union[str, float] = Field(default="standard_23", description="Rate key or percentage")


class Form11Request(BaseModel):
    """Request model for Form 11 income tax."""
    tax_year: Optional[int] = Field(default=None, ge=2000, le=2100)
    director_name: str = ""
    pps_number: str = ""
    date_of_birth: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    marital_status: str = Field(default="single", description="single, married, civil_partner, widowed, separated")
    assessment_basis: str = Field(default="single", description="single, joint, separate")
    salary: float = 0
    dividends: float = 0
    bik: float = 0
    business_income: float = 0
    business_expenses: float = 0
    capital_allowances: float = 0
    rental_income: float = 0
    rental_expenses: float = 0
    foreign_income: float = 0
    other_income: float = 0
    capital_gains: float = 0
    capital_losses: float = 0
    pension_contributions: float = Field(default=0, ge=0)
    medical_expenses: float = Field(default=0, ge=0)
    rent_paid: float = Field(default=0, ge=0)
    charitable_donations: float = Field(default=0, ge=0)
    remote_working_costs: float = Field(default=0, ge=0)
    spouse_income: float = 0
    claim_home_carer: bool = False
    claim_single_parent: bool = False
    has_paye_income: bool = False
    mileage_allowance: float = Field(default=0, ge=0)
    preliminary_tax_paid: float = Field(default=0, ge=0)
    change_effective_date: Optional[str] = None
    pre_change_assessment_basis: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "tax_year": 2025,
                "salary": 75000,
                "has_paye_income": True,
                "pension_contributions": 5000,
                "medical_expenses": 1000,
            }
        }


class VehicleBIKRequest(BaseModel):
    omv: float = Field(..., ge=0, description="Original market value")
    business_km: float = Field(default=0, ge=0)
    tax_year: Optional[int] = Field(default=None, ge=2000, le=2100)


class CT1QuestionnaireIn(BaseModel):
    capital_allowances_plant: float = 0
    capital_allowances_motor_vehicles: float = 0
    capital_allowances_total: Optional[float] = None
    losses_forward: float = 0
    close_company_surcharge: float = 0
    preliminary_ct_paid: float = 0
    vat_status: Optional[str] = None
    vat_change_date: Optional[str] = None
    vat_status_before: Optional[str] = None
    vat_status_after: Optional[str] = None


class CT1Request(BaseModel):
    """Request model for the CT1 computation."""
    transactions: List[TransactionIn] = Field(default_factory=list)
    questionnaire: CT1QuestionnaireIn = Field(default_factory=CT1QuestionnaireIn)
    tax_year: Optional[int] = Field(default=None, ge=2000, le=2100)
    vehicle: Optional[VehicleIn] = None
    business_type: Optional[str] = None
    vat_position: Optional[float] = Field(default=None, description="Net VAT; positive payable, negative refundable")
    directors_loan_travel: float = Field(default=0, ge=0)
    rct_prepayment: float = Field(default=0, ge=0)


class TrialBalanceRequest(BaseModel):
    transactions: List[TransactionIn] = Field(default_factory=list)
    net_directors_loan: float = 0
    directors_drawings: float = Field(default=0, ge=0)
    vat_position: Optional[float] = None


# ==================== STATUS & REFERENCE ====================

@router.get("/status")
async def get_status():
    """
    Get status of all tax calculation modules.

    Returns headline rates and the tax years supported.
    """
    return get_tax_engine_status()


@router.get("/rates")
async def get_rates(tax_year: Optional[int] = None):
    """Revenue mileage/subsistence rates, VAT rates and income tax constants."""
    year = _tax_year(tax_year)
    return {
        "revenue_rates": get_revenue_rates(),
        "vat_rates": vat_rate_table(),
        "income_tax": get_tax_constants(year).to_dict(),
    }


@router.get("/eu-vat/rules")
async def get_eu_vat_rules():
    """EU member states, UK rules, OSS, Intrastat and VAT3 box reference."""
    return get_eu_vat_reference()


# ==================== MILEAGE & SUBSISTENCE ====================

@router.post("/mileage/calculate")
async def calculate_mileage(request: MileageRequest):
    """
    Calculate the tax-free mileage allowance at civil service rates.

    Bands are cumulative over the year's total business km.
    """
    try:
        allowance = calculate_mileage_allowance(request.distance_km, request.vehicle_type)
        return {
            "distance_km": request.distance_km,
            "vehicle_type": request.vehicle_type,
            "allowance": float(allowance),
            "bands": mileage_band_breakdown(request.distance_km, request.vehicle_type),
        }
    except ValueError as e:
        raise _bad_request(e)


@router.post("/mileage/commute")
async def calculate_commute(request: CommuteRequest):
    working_days = request.working_days_per_year or get_settings().COMMUTE_WORKING_DAYS
    allowance = calculate_annual_commute_mileage(request.one_way_km, working_days)
    return {
        "one_way_km": request.one_way_km,
        "working_days_per_year": working_days,
        "annual_km": request.one_way_km * 2 * working_days,
        "allowance": float(allowance),
    }


@router.post("/subsistence/calculate")
async def calculate_subsistence(request: SubsistenceRequest):
    return calculate_subsistence_allowance(request.nights_away, request.days_away).to_dict()


# ==================== VEHICLE DEPRECIATION ====================

@router.post("/vehicle/depreciation")
async def calculate_depreciation(request: VehicleDepreciationRequest):
    """
    Motor vehicle wear & tear: 12.5% a year over 8 years on cost capped at
    EUR 24,000, apportioned by business use.
    """
    vehicle = request.vehicle.to_asset()
    result = calculate_vehicle_depreciation(vehicle, _tax_year(request.tax_year)).to_dict()
    if request.include_schedule:
        result["schedule"] = build_depreciation_schedule(vehicle)
    return result


# ==================== RELIEFS ====================

@router.post("/reliefs/scan")
async def scan_reliefs(request: ReliefScanRequest):
    """Classify personal transactions into Form 11 relief buckets."""
    return scan_for_reliefs([t.to_record() for t in request.transactions]).to_dict()


# ==================== CROSS-BORDER VAT ====================

@router.post("/vat/cross-border")
async def cross_border_vat(request: CrossBorderVATRequest):
    """
    Determine VAT treatment, VAT3 boxes and reporting for a cross-border
    transaction. Combinations outside the rule table fall back to standard
    rating with a warning.
    """
    query = CrossBorderVATQuery(
        direction=request.direction,
        counterparty_location=request.counterparty_location,
        supply_type=request.supply_type,
        customer_type=request.customer_type,
    )
    return determine_cross_border_vat(query).to_dict()


@router.post("/vat/validate-number")
async def validate_vat_number(request: VATNumberRequest):
    return validate_eu_vat_format(request.vat_number, request.country_code).to_dict()


@router.post("/vat/import")
async def import_vat(request: ImportVATRequest):
    return calculate_import_vat(
        request.cif_value,
        request.customs_duty,
        request.excise_duty,
        request.vat_rate,
    ).to_dict()


@router.post("/vat/oss-threshold")
async def oss_threshold(request: OSSThresholdRequest):
    return check_oss_threshold(request.annual_eu_b2c_sales).to_dict()


@router.post("/vat/intrastat-threshold")
async def intrastat_threshold(request: IntrastatThresholdRequest):
    return check_intrastat_threshold(request.arrivals_total, request.dispatches_total).to_dict()


# ==================== DEDUCTIBILITY ====================

@router.post("/vat/deductibility")
async def vat_deductibility(request: DeductibilityRequest):
    """Section 59/60 VATCA 2010 blocked input credit check."""
    return is_vat_deductible(request.description, request.category, request.account).to_dict()


@router.post("/ct/deductibility")
async def ct_deductibility(request: DeductibilityRequest):
    return is_ct_deductible(request.description, request.category).to_dict()


@router.post("/vat/from-gross")
async def vat_from_gross(request: VATFromGrossRequest):
    return calculate_vat_from_gross(request.gross_amount, request.vat_rate).to_dict()


@router.get("/accounts/suggest")
async def suggest_account(category: str, transaction_type: str = "expense", vat_rate: Optional[str] = None):
    """Suggested Chart of Accounts entry for a transaction category."""
    suggestion = get_account_suggestion(category, transaction_type, vat_rate)
    if suggestion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No account mapping for {category}")
    return {
        "account_name": suggestion.account_name,
        "account_type": suggestion.account_type,
        "confidence": suggestion.confidence,
    }


# ==================== FORM 11 ====================

@router.post("/form11/calculate")
async def form11_calculate(request: Form11Request):
    """
    Compute a Form 11 liability: income tax, USC, PRSI Class S and CGT,
    less preliminary tax paid.
    """
    try:
        data = Form11Input(**request.model_dump(exclude={"tax_year"}))
        return calculate_form11(data, _tax_year(request.tax_year)).to_dict()
    except ValueError as e:
        raise _bad_request(e)


@router.post("/form11/vehicle-bik")
async def form11_vehicle_bik(request: VehicleBIKRequest):
    year = _tax_year(request.tax_year)
    return {
        "omv": request.omv,
        "business_km": request.business_km,
        "tax_year": year,
        "bik": float(calculate_vehicle_bik(request.omv, request.business_km, year)),
    }


# ==================== CT1 & TRIAL BALANCE ====================

@router.post("/ct1/compute")
async def ct1_compute(request: CT1Request):
    """
    Compute the CT1 return: trading profit after add-backs and capital
    allowances, CT at 12.5%, surcharge and credits.
    """
    result = compute_ct1(
        [t.to_record() for t in request.transactions],
        questionnaire=CT1Questionnaire(**request.questionnaire.model_dump()),
        tax_year=_tax_year(request.tax_year),
        vehicle=request.vehicle.to_asset() if request.vehicle else None,
        business_type=request.business_type,
        vat_position=request.vat_position,
        directors_loan_travel=request.directors_loan_travel,
        rct_prepayment=request.rct_prepayment,
    )
    return result.to_dict()


@router.post("/trial-balance")
async def trial_balance(request: TrialBalanceRequest) -> Dict[str, Any]:
    """Synthesize a double-entry trial balance from bank transactions."""
    result = build_trial_balance(
        [t.to_record() for t in request.transactions],
        net_directors_loan=request.net_directors_loan,
        directors_drawings=request.directors_drawings,
        vat_position=request.vat_position,
    )
    return result.to_dict()
