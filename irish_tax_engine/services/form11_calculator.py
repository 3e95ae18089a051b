"""
Irish Tax Engine - Form 11 Income Tax Calculator

Self-assessed income tax for company directors and sole traders:
- Income tax at 20% / 40% with single, joint and split-year cut-offs
- Personal tax credits and reliefs
- Universal Social Charge (USC)
- PRSI Class S
- Capital Gains Tax
- Benefit-in-kind on company vehicles

Rates per Revenue.ie and Finance Acts 2023-2025.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from irish_tax_engine.models.enums import AssessmentBasis, MaritalStatus
from irish_tax_engine.utils.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


# ==================== TAX CONSTANTS ====================

@dataclass(frozen=True)
class StandardRateCutoff:
    single: Decimal
    married_one_income: Decimal
    married_two_incomes: Decimal
    second_earner_max: Decimal


@dataclass(frozen=True)
class PersonalCredits:
    single: Decimal
    married: Decimal
    earned_income: Decimal
    paye: Decimal
    home_carer: Decimal
    single_parent: Decimal


@dataclass(frozen=True)
class TaxConstants:
    """Income tax, USC, PRSI and CGT parameters for one tax year."""
    year: int
    standard_rate_cutoff: StandardRateCutoff
    # (upper bound, rate); None marks the open top band
    usc_bands: Tuple[Tuple[Optional[Decimal], Decimal], ...]
    prsi_rate: Decimal
    prsi_minimum: Decimal
    credits: PersonalCredits
    prsi_threshold: Decimal = Decimal("5000")
    rent_credit_single: Decimal = Decimal("1000")
    rent_credit_couple: Decimal = Decimal("2000")
    standard_rate: Decimal = Decimal("0.20")
    higher_rate: Decimal = Decimal("0.40")
    usc_exemption_threshold: Decimal = Decimal("13000")
    pension_age_limits: Tuple[Tuple[Optional[int], Decimal], ...] = (
        (29, Decimal("0.15")),
        (39, Decimal("0.20")),
        (49, Decimal("0.25")),
        (54, Decimal("0.30")),
        (59, Decimal("0.35")),
        (None, Decimal("0.40")),
    )
    pension_earnings_cap: Decimal = Decimal("115000")
    medical_relief_rate: Decimal = Decimal("0.20")
    remote_working_rate: Decimal = Decimal("0.30")
    charitable_minimum: Decimal = Decimal("250")
    tuition_full_time_disregard: Decimal = Decimal("3000")
    tuition_part_time_disregard: Decimal = Decimal("1500")
    tuition_max_per_course: Decimal = Decimal("7000")
    tuition_relief_rate: Decimal = Decimal("0.20")
    cgt_rate: Decimal = Decimal("0.33")
    cgt_annual_exemption: Decimal = Decimal("1270")
    # (max business km, rate on OMV)
    vehicle_bik_bands: Tuple[Tuple[Optional[int], Decimal], ...] = (
        (24000, Decimal("0.2267")),
        (32000, Decimal("0.18")),
        (40000, Decimal("0.135")),
        (48000, Decimal("0.09")),
        (None, Decimal("0.045")),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "standard_rate_cutoff": {
                "single": float(self.standard_rate_cutoff.single),
                "married_one_income": float(self.standard_rate_cutoff.married_one_income),
                "married_two_incomes": float(self.standard_rate_cutoff.married_two_incomes),
                "second_earner_max": float(self.standard_rate_cutoff.second_earner_max),
            },
            "standard_rate": float(self.standard_rate),
            "higher_rate": float(self.higher_rate),
            "usc_bands": [
                {"to": float(upper) if upper is not None else None, "rate": float(rate)}
                for upper, rate in self.usc_bands
            ],
            "usc_exemption_threshold": float(self.usc_exemption_threshold),
            "prsi": {
                "rate": float(self.prsi_rate),
                "minimum": float(self.prsi_minimum),
                "threshold": float(self.prsi_threshold),
            },
            "credits": {
                "single": float(self.credits.single),
                "married": float(self.credits.married),
                "earned_income": float(self.credits.earned_income),
                "paye": float(self.credits.paye),
                "home_carer": float(self.credits.home_carer),
                "single_parent": float(self.credits.single_parent),
            },
            "rent_credit": {"single": float(self.rent_credit_single), "couple": float(self.rent_credit_couple)},
            "pension_earnings_cap": float(self.pension_earnings_cap),
            "cgt": {"rate": float(self.cgt_rate), "annual_exemption": float(self.cgt_annual_exemption)},
        }


_CREDITS_2025 = PersonalCredits(
    single=Decimal("2000"),
    married=Decimal("4000"),
    earned_income=Decimal("2000"),
    paye=Decimal("2000"),
    home_carer=Decimal("1950"),
    single_parent=Decimal("1900"),
)

_CUTOFF_2025 = StandardRateCutoff(
    single=Decimal("44000"),
    married_one_income=Decimal("53000"),
    married_two_incomes=Decimal("88000"),
    second_earner_max=Decimal("35000"),
)

TAX_CONSTANTS_BY_YEAR: Dict[int, TaxConstants] = {
    2024: TaxConstants(
        year=2024,
        standard_rate_cutoff=StandardRateCutoff(
            single=Decimal("42000"),
            married_one_income=Decimal("51000"),
            married_two_incomes=Decimal("84000"),
            second_earner_max=Decimal("33000"),
        ),
        usc_bands=(
            (Decimal("12012"), Decimal("0.005")),
            (Decimal("25760"), Decimal("0.02")),
            (Decimal("70044"), Decimal("0.04")),
            (Decimal("100000"), Decimal("0.08")),
            (None, Decimal("0.11")),
        ),
        # Blended 4% Jan-Sep and 4.1% Oct-Dec
        prsi_rate=Decimal("0.04025"),
        prsi_minimum=Decimal("538"),
        credits=PersonalCredits(
            single=Decimal("1875"),
            married=Decimal("3750"),
            earned_income=Decimal("1875"),
            paye=Decimal("1875"),
            home_carer=Decimal("1800"),
            single_parent=Decimal("1750"),
        ),
    ),
    2025: TaxConstants(
        year=2025,
        standard_rate_cutoff=_CUTOFF_2025,
        usc_bands=(
            (Decimal("12012"), Decimal("0.005")),
            (Decimal("27382"), Decimal("0.02")),
            (Decimal("70044"), Decimal("0.03")),
            (Decimal("100000"), Decimal("0.08")),
            (None, Decimal("0.11")),
        ),
        prsi_rate=Decimal("0.04125"),
        prsi_minimum=Decimal("650"),
        credits=_CREDITS_2025,
    ),
    2026: TaxConstants(
        year=2026,
        standard_rate_cutoff=_CUTOFF_2025,
        usc_bands=(
            (Decimal("12012"), Decimal("0.005")),
            (Decimal("28700"), Decimal("0.02")),
            (Decimal("70044"), Decimal("0.03")),
            (Decimal("100000"), Decimal("0.08")),
            (None, Decimal("0.11")),
        ),
        # Blended 4.2% Jan-Sep and 4.35% Oct-Dec
        prsi_rate=Decimal("0.042375"),
        prsi_minimum=Decimal("650"),
        credits=_CREDITS_2025,
    ),
}


def get_tax_constants(year: int) -> TaxConstants:
    """Constants for ``year``, falling back to the nearest known year."""
    if year in TAX_CONSTANTS_BY_YEAR:
        return TAX_CONSTANTS_BY_YEAR[year]
    closest = min(sorted(TAX_CONSTANTS_BY_YEAR), key=lambda y: abs(y - year))
    logger.debug(f"No tax constants for {year}, using {closest}")
    return TAX_CONSTANTS_BY_YEAR[closest]


def default_tax_year(today: Optional[date] = None) -> int:
    """Returns are prepared for the previous year until November."""
    today = today or date.today()
    return today.year if today.month >= 11 else today.year - 1


# ==================== INPUT / RESULT ====================

@dataclass
class Form11Input:
    """Input for a Form 11 computation. Money fields accept any numeric type."""
    # Identity
    director_name: str = ""
    pps_number: str = ""
    date_of_birth: Optional[str] = None  # ISO date
    marital_status: str = "single"
    assessment_basis: str = "single"

    # Schedule E
    salary: Any = 0
    dividends: Any = 0
    bik: Any = 0

    # Schedule D
    business_income: Any = 0
    business_expenses: Any = 0
    capital_allowances: Any = 0

    # Other income
    rental_income: Any = 0
    rental_expenses: Any = 0
    foreign_income: Any = 0
    other_income: Any = 0

    # Capital gains
    capital_gains: Any = 0
    capital_losses: Any = 0

    # Reliefs
    pension_contributions: Any = 0
    medical_expenses: Any = 0
    rent_paid: Any = 0
    charitable_donations: Any = 0
    remote_working_costs: Any = 0

    spouse_income: Any = 0

    claim_home_carer: bool = False
    claim_single_parent: bool = False
    has_paye_income: bool = False

    # Personal vehicle commute, Revenue civil service rates
    mileage_allowance: Any = 0

    preliminary_tax_paid: Any = 0

    # Split-year re-evaluation
    change_effective_date: Optional[str] = None
    pre_change_assessment_basis: Optional[str] = None


@dataclass
class TaxBandLine:
    label: str
    amount: Decimal
    rate: Decimal
    tax: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "amount": float(self.amount),
            "rate": float(self.rate),
            "tax": float(self.tax),
        }


@dataclass
class CreditLine:
    label: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "amount": float(self.amount)}


@dataclass
class Form11Result:
    """Result of a Form 11 computation."""
    tax_year: int

    # Income
    schedule_e: Decimal
    schedule_d: Decimal
    rental_profit: Decimal
    foreign_income: Decimal
    other_income: Decimal
    spouse_income: Decimal
    total_gross_income: Decimal

    # Deductions
    pension_relief: Decimal
    pension_age_limit: Decimal
    total_deductions: Decimal
    assessable_income: Decimal

    # Income tax
    income_tax_bands: List[TaxBandLine]
    gross_income_tax: Decimal
    credits: List[CreditLine]
    total_credits: Decimal
    net_income_tax: Decimal

    # USC
    usc_bands: List[TaxBandLine]
    total_usc: Decimal
    usc_exempt: bool

    # PRSI
    prsi_assessable: Decimal
    prsi_calculated: Decimal
    prsi_payable: Decimal

    # CGT
    cgt_applicable: bool
    cgt_gains: Decimal
    cgt_losses: Decimal
    cgt_exemption: Decimal
    cgt_payable: Decimal

    # Summary
    total_liability: Decimal
    preliminary_tax_paid: Decimal
    balance_due: Decimal

    split_year_applied: bool = False
    split_year_note: str = ""

    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tax_year": self.tax_year,
            "income": {
                "schedule_e": float(self.schedule_e),
                "schedule_d": float(self.schedule_d),
                "rental_profit": float(self.rental_profit),
                "foreign_income": float(self.foreign_income),
                "other_income": float(self.other_income),
                "spouse_income": float(self.spouse_income),
                "total_gross_income": float(self.total_gross_income),
            },
            "deductions": {
                "pension_relief": float(self.pension_relief),
                "pension_age_limit": float(self.pension_age_limit),
                "total_deductions": float(self.total_deductions),
                "assessable_income": float(self.assessable_income),
            },
            "income_tax": {
                "bands": [b.to_dict() for b in self.income_tax_bands],
                "gross_income_tax": float(self.gross_income_tax),
                "credits": [c.to_dict() for c in self.credits],
                "total_credits": float(self.total_credits),
                "net_income_tax": float(self.net_income_tax),
            },
            "usc": {
                "bands": [b.to_dict() for b in self.usc_bands],
                "total_usc": float(self.total_usc),
                "exempt": self.usc_exempt,
            },
            "prsi": {
                "assessable": float(self.prsi_assessable),
                "calculated": float(self.prsi_calculated),
                "payable": float(self.prsi_payable),
            },
            "cgt": {
                "applicable": self.cgt_applicable,
                "gains": float(self.cgt_gains),
                "losses": float(self.cgt_losses),
                "exemption": float(self.cgt_exemption),
                "payable": float(self.cgt_payable),
            },
            "summary": {
                "total_liability": float(self.total_liability),
                "preliminary_tax_paid": float(self.preliminary_tax_paid),
                "balance_due": float(self.balance_due),
            },
            "split_year_applied": self.split_year_applied,
            "split_year_note": self.split_year_note,
            "warnings": self.warnings,
            "notes": self.notes,
        }


# ==================== HELPERS ====================

def _fmt_whole(amount: Decimal) -> str:
    return f"{amount:,.0f}"


def _fmt_cents(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        logger.debug(f"Unparseable date {value!r}")
        return None


def age_at_year_end(date_of_birth: Any, tax_year: int) -> int:
    """Age on 31 December of the tax year. Missing DOB defaults to 35."""
    dob = _parse_date(date_of_birth)
    if dob is None:
        return 35
    return tax_year - dob.year


def _is_couple(marital_status: str) -> bool:
    return marital_status in (MaritalStatus.married.value, MaritalStatus.civil_partner.value)


def get_standard_rate_cutoff(
    basis: str,
    marital_status: str,
    spouse_income: Decimal,
    constants: TaxConstants
) -> Decimal:
    cutoff = constants.standard_rate_cutoff
    if basis == AssessmentBasis.joint.value and marital_status == MaritalStatus.married.value:
        return cutoff.single + min(spouse_income, cutoff.second_earner_max)
    return cutoff.single


def pension_age_rate(age: int, constants: TaxConstants) -> Decimal:
    for max_age, rate in constants.pension_age_limits:
        if max_age is None or age <= max_age:
            return rate
    return constants.pension_age_limits[-1][1]


def calculate_income_tax_bands(assessable_income: Decimal, cutoff: Decimal, constants: TaxConstants) -> List[TaxBandLine]:
    if assessable_income <= ZERO:
        return []

    at_standard = min(assessable_income, cutoff)
    at_higher = max(ZERO, assessable_income - cutoff)

    bands = []
    if at_standard > ZERO:
        bands.append(TaxBandLine(
            label="Standard rate (20%)",
            amount=at_standard,
            rate=constants.standard_rate,
            tax=at_standard * constants.standard_rate,
        ))
    if at_higher > ZERO:
        bands.append(TaxBandLine(
            label="Higher rate (40%)",
            amount=at_higher,
            rate=constants.higher_rate,
            tax=at_higher * constants.higher_rate,
        ))
    return bands


def calculate_credits(data: Form11Input, constants: TaxConstants) -> List[CreditLine]:
    credits = constants.credits
    couple = _is_couple(data.marital_status)
    lines = []

    if couple:
        lines.append(CreditLine("Married / Civil Partner Credit", credits.married))
    else:
        lines.append(CreditLine("Single Person Credit", credits.single))

    lines.append(CreditLine("Earned Income Credit", credits.earned_income))

    if data.has_paye_income:
        lines.append(CreditLine("PAYE Credit", credits.paye))
    if data.claim_home_carer:
        lines.append(CreditLine("Home Carer Credit", credits.home_carer))
    if data.claim_single_parent:
        lines.append(CreditLine("Single Parent Credit", credits.single_parent))

    medical = to_decimal(data.medical_expenses)
    if medical > ZERO:
        lines.append(CreditLine(
            "Medical Expenses (20%)",
            round_currency(medical * constants.medical_relief_rate),
        ))

    rent = to_decimal(data.rent_paid)
    if rent > ZERO:
        max_rent = constants.rent_credit_couple if couple else constants.rent_credit_single
        lines.append(CreditLine("Rent Tax Credit", min(rent, max_rent)))

    remote = to_decimal(data.remote_working_costs)
    if remote > ZERO:
        lines.append(CreditLine(
            "Remote Working Relief (30%)",
            round_currency(remote * constants.remote_working_rate),
        ))

    return lines


def calculate_usc(total_income: Decimal, constants: TaxConstants) -> Tuple[List[TaxBandLine], bool]:
    """USC bands on total income. Returns (bands, exempt)."""
    if total_income <= constants.usc_exemption_threshold:
        return [], True

    bands = []
    remaining = total_income
    lower = ZERO
    for upper, rate in constants.usc_bands:
        width = remaining if upper is None else upper - lower
        taxable = min(remaining, width)
        if taxable <= ZERO:
            break
        bands.append(TaxBandLine(
            label=f"USC {rate * 100:.1f}%",
            amount=taxable,
            rate=rate,
            tax=round_currency(taxable * rate),
        ))
        remaining -= taxable
        if upper is not None:
            lower = upper

    return bands, False


def calculate_prsi(assessable_income: Decimal, constants: TaxConstants) -> Tuple[Decimal, Decimal]:
    """PRSI Class S. Returns (calculated, payable)."""
    if assessable_income < constants.prsi_threshold:
        return ZERO, ZERO
    calculated = assessable_income * constants.prsi_rate
    payable = max(calculated, constants.prsi_minimum)
    return round_currency(calculated), round_currency(payable)


def calculate_vehicle_bik(omv: Any, business_km: Any, tax_year: Optional[int] = None) -> Decimal:
    """BIK on a company car: original market value x the rate for the business km band."""
    constants = get_tax_constants(tax_year or default_tax_year())
    km = to_decimal(business_km)
    rate = constants.vehicle_bik_bands[-1][1]
    for max_km, band_rate in constants.vehicle_bik_bands:
        if max_km is None or km <= max_km:
            rate = band_rate
            break
    return round_currency(to_decimal(omv) * rate)


def _split_year_cutoff(data: Form11Input, spouse_income: Decimal, constants: TaxConstants) -> Optional[Tuple[Decimal, str]]:
    change_date = _parse_date(data.change_effective_date)
    if change_date is None or not data.pre_change_assessment_basis:
        return None

    year_start = date(change_date.year, 1, 1)
    total_days = (date(change_date.year, 12, 31) - year_start).days + 1
    days_before = (change_date - year_start).days
    days_after = total_days - days_before

    pre_cutoff = get_standard_rate_cutoff(data.pre_change_assessment_basis, data.marital_status, spouse_income, constants)
    post_cutoff = get_standard_rate_cutoff(data.assessment_basis, data.marital_status, spouse_income, constants)

    proportional = (
        pre_cutoff * Decimal(days_before) / Decimal(total_days)
        + post_cutoff * Decimal(days_after) / Decimal(total_days)
    ).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    note = (
        f"Assessment basis changed on {data.change_effective_date}. "
        f"Standard rate cutoff proportioned: {days_before} days at old basis + {days_after} days at new basis "
        f"= €{_fmt_whole(proportional)}."
    )
    return proportional, note


# ==================== MAIN CALCULATOR ====================

def calculate_form11(data: Form11Input, tax_year: Optional[int] = None) -> Form11Result:
    """
    Compute a full Form 11 liability.

    Order: income by schedule, pension relief, income tax bands, credits,
    USC on gross income, PRSI on assessable income, CGT, then the balance
    after preliminary tax. Marital status and assessment basis must be valid
    enum values.
    """
    marital_status = MaritalStatus(data.marital_status).value
    AssessmentBasis(data.assessment_basis)
    if data.pre_change_assessment_basis:
        AssessmentBasis(data.pre_change_assessment_basis)

    year = tax_year or default_tax_year()
    constants = get_tax_constants(year)
    warnings: List[str] = []
    notes: List[str] = []

    salary = to_decimal(data.salary)
    business_income = to_decimal(data.business_income)
    spouse_income = to_decimal(data.spouse_income)
    foreign_income = to_decimal(data.foreign_income)
    other_income = to_decimal(data.other_income)
    mileage = to_decimal(data.mileage_allowance)
    pension_contributions = to_decimal(data.pension_contributions)
    charitable = to_decimal(data.charitable_donations)
    preliminary = to_decimal(data.preliminary_tax_paid)

    split_year_applied = False
    split_year_note = ""
    cutoff = get_standard_rate_cutoff(data.assessment_basis, marital_status, spouse_income, constants)

    split = _split_year_cutoff(data, spouse_income, constants)
    if split is not None:
        cutoff, split_year_note = split
        split_year_applied = True
        notes.append(split_year_note)

    if mileage > ZERO:
        notes.append(
            f"Mileage allowance claimed: €{_fmt_cents(mileage)} "
            f"(personal vehicle commute - Revenue civil service rates)."
        )

    # 1. Income
    schedule_e = max(ZERO, salary + to_decimal(data.dividends) + to_decimal(data.bik) - mileage)
    schedule_d = max(
        ZERO,
        business_income - to_decimal(data.business_expenses) - to_decimal(data.capital_allowances),
    )
    rental_profit = max(ZERO, to_decimal(data.rental_income) - to_decimal(data.rental_expenses))
    total_gross_income = schedule_e + schedule_d + rental_profit + foreign_income + other_income + spouse_income

    # 2. Pension relief on net relevant earnings
    age = age_at_year_end(data.date_of_birth, year)
    age_rate = pension_age_rate(age, constants)
    relevant_earnings = min(salary + business_income, constants.pension_earnings_cap)
    pension_relief = min(pension_contributions, relevant_earnings * age_rate)
    total_deductions = pension_relief
    assessable_income = max(ZERO, total_gross_income - total_deductions)

    if pension_contributions > ZERO and pension_relief < pension_contributions:
        warnings.append(
            f"Pension contributions capped at {age_rate * 100:.0f}% of net relevant earnings (age-based limit). "
            f"Relief granted: €{_fmt_cents(pension_relief)}"
        )

    # 3. Income tax
    income_tax_bands = calculate_income_tax_bands(assessable_income, cutoff, constants)
    gross_income_tax = sum((b.tax for b in income_tax_bands), ZERO)

    # 4. Credits
    credits = calculate_credits(data, constants)
    total_credits = sum((c.amount for c in credits), ZERO)
    net_income_tax = max(ZERO, gross_income_tax - total_credits)

    # 5. USC
    usc_bands, usc_exempt = calculate_usc(total_gross_income, constants)
    total_usc = sum((b.tax for b in usc_bands), ZERO)
    if usc_exempt:
        notes.append("USC exempt - total income is below €13,000.")

    # 6. PRSI
    prsi_calculated, prsi_payable = calculate_prsi(assessable_income, constants)
    if prsi_payable > ZERO and prsi_payable == constants.prsi_minimum:
        notes.append(f"Minimum PRSI Class S contribution of €{_fmt_whole(constants.prsi_minimum)} applies.")

    # 7. CGT
    capital_gains = to_decimal(data.capital_gains)
    capital_losses = to_decimal(data.capital_losses)
    net_gains = capital_gains - capital_losses
    if net_gains <= ZERO:
        cgt_applicable, cgt_exemption, cgt_payable = False, ZERO, ZERO
    else:
        cgt_taxable = max(ZERO, net_gains - constants.cgt_annual_exemption)
        cgt_applicable = cgt_taxable > ZERO
        cgt_exemption = constants.cgt_annual_exemption
        cgt_payable = round_currency(cgt_taxable * constants.cgt_rate)

    # 8. Summary
    total_liability = round_currency(net_income_tax + total_usc + prsi_payable + cgt_payable)
    balance_due = round_currency(total_liability - preliminary)

    if balance_due < ZERO:
        notes.append("Overpayment detected - you may be due a refund.")

    if ZERO < charitable < constants.charitable_minimum:
        warnings.append(
            f"Charitable donations must be at least €{_fmt_whole(constants.charitable_minimum)} to qualify for relief."
        )

    logger.debug(
        f"Form 11 {year}: assessable {assessable_income}, IT {net_income_tax}, "
        f"USC {total_usc}, PRSI {prsi_payable}, CGT {cgt_payable}, balance {balance_due}"
    )

    return Form11Result(
        tax_year=year,
        schedule_e=schedule_e,
        schedule_d=schedule_d,
        rental_profit=rental_profit,
        foreign_income=foreign_income,
        other_income=other_income,
        spouse_income=spouse_income,
        total_gross_income=total_gross_income,
        pension_relief=pension_relief,
        pension_age_limit=age_rate,
        total_deductions=total_deductions,
        assessable_income=assessable_income,
        income_tax_bands=income_tax_bands,
        gross_income_tax=round_currency(gross_income_tax),
        credits=credits,
        total_credits=total_credits,
        net_income_tax=round_currency(net_income_tax),
        usc_bands=usc_bands,
        total_usc=round_currency(total_usc),
        usc_exempt=usc_exempt,
        prsi_assessable=assessable_income,
        prsi_calculated=prsi_calculated,
        prsi_payable=prsi_payable,
        cgt_applicable=cgt_applicable,
        cgt_gains=capital_gains,
        cgt_losses=capital_losses,
        cgt_exemption=cgt_exemption,
        cgt_payable=cgt_payable,
        total_liability=total_liability,
        preliminary_tax_paid=preliminary,
        balance_due=balance_due,
        split_year_applied=split_year_applied,
        split_year_note=split_year_note,
        warnings=warnings,
        notes=notes,
    )
