"""
Irish Tax Engine - Chart of Accounts Mapping

Maps transaction categories onto Chart of Accounts entries. Each category
lists candidate accounts per transaction direction; the first candidate is
the suggestion.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


class AccountType:
    INCOME = "Income"
    COST_OF_SALES = "Cost of Sales"
    EXPENSE = "Expense"
    VAT = "VAT"
    PAYROLL = "Payroll"
    FIXED_ASSETS = "Fixed Assets"
    CURRENT_ASSETS = "Current Assets"
    CURRENT_LIABILITIES = "Current Liabilities"
    EQUITY = "Equity"


_A = AccountType

# category -> {"expense": [(account, type), ...], "income": [...]}
CATEGORY_TO_ACCOUNT_MAP: Dict[str, Dict[str, List[Tuple[str, str]]]] = {
    # Materials & supplies
    "Materials": {
        "expense": [("Materials Purchased", _A.COST_OF_SALES), ("Stock Purchases", _A.COST_OF_SALES)],
        "income": [],
    },
    "Tools": {
        "expense": [("Small Tools & Equipment", _A.EXPENSE), ("Tools & Machinery", _A.FIXED_ASSETS)],
        "income": [],
    },
    "Equipment": {
        "expense": [("Computer Equipment", _A.EXPENSE), ("Office Equipment", _A.FIXED_ASSETS)],
        "income": [],
    },

    # Motor & travel
    "Motor/travel": {
        "expense": [("Motor - Fuel", _A.EXPENSE), ("Motor Tax & Insurance", _A.EXPENSE)],
        "income": [],
    },
    "Fuel": {"expense": [("Motor - Fuel", _A.EXPENSE)], "income": []},
    "Motor Vehicle Expenses": {
        "expense": [("Motor - Fuel", _A.EXPENSE), ("Motor - Repairs", _A.EXPENSE)],
        "income": [],
    },
    "Repairs and Maintenance": {
        "expense": [("Repairs & Maintenance", _A.EXPENSE), ("Motor - Repairs", _A.EXPENSE)],
        "income": [],
    },
    "Tolls & Parking": {
        "expense": [("Motor Tax & Insurance", _A.EXPENSE), ("Travel & Subsistence", _A.EXPENSE)],
        "income": [],
    },
    "Subsistence": {
        "expense": [("Travel & Subsistence", _A.EXPENSE), ("Accommodation", _A.EXPENSE)],
        "income": [],
    },

    # Software & tech
    "Software": {
        "expense": [("Software & Subscriptions", _A.EXPENSE), ("Computer Equipment", _A.EXPENSE)],
        "income": [],
    },
    "Phone": {"expense": [("Telephone & Internet", _A.EXPENSE)], "income": []},
    "Marketing": {
        "expense": [("Website Hosting", _A.EXPENSE), ("Advertising", _A.EXPENSE)],
        "income": [],
    },

    # Professional services
    "Consulting & Accounting": {
        "expense": [
            ("Accountancy Fees", _A.EXPENSE),
            ("Consultancy Fees", _A.EXPENSE),
            ("Legal Fees", _A.EXPENSE),
        ],
        "income": [],
    },
    "Insurance": {"expense": [("Insurance", _A.EXPENSE)], "income": []},

    # Bank & finance
    "Bank fees": {
        "expense": [("Bank Charges", _A.EXPENSE), ("Merchant Fees", _A.EXPENSE)],
        "income": [],
    },
    "Bank Fees": {
        "expense": [("Bank Charges", _A.EXPENSE), ("Merchant Fees", _A.EXPENSE)],
        "income": [],
    },

    # Labour & wages
    "Labour costs": {
        "expense": [("Subcontractors", _A.COST_OF_SALES), ("Direct Wages", _A.COST_OF_SALES)],
        "income": [],
    },
    "Sub Con": {"expense": [("Subcontractors", _A.COST_OF_SALES)], "income": []},
    "Wages": {
        "expense": [("Wages & Salaries", _A.EXPENSE), ("Employer PRSI", _A.EXPENSE)],
        "income": [],
    },

    # Office & general
    "Office": {
        "expense": [("Office Supplies", _A.EXPENSE), ("Printing & Stationery", _A.EXPENSE)],
        "income": [],
    },
    "Rent": {"expense": [("Rent", _A.EXPENSE)], "income": []},
    "Cleaning": {"expense": [("Cleaning", _A.EXPENSE)], "income": []},
    "Training": {"expense": [("Staff Training", _A.EXPENSE)], "income": []},
    "Workwear": {
        "expense": [("PPE / Protective Gear", _A.EXPENSE), ("Uniforms", _A.EXPENSE)],
        "income": [],
    },
    "Advertising": {
        "expense": [("Advertising", _A.EXPENSE), ("Social Media Ads", _A.EXPENSE)],
        "income": [],
    },
    "General Expenses": {"expense": [("General Expenses", _A.EXPENSE)], "income": []},
    "other": {
        "expense": [("General Expenses", _A.EXPENSE)],
        "income": [("Other Income", _A.INCOME)],
    },
    "Drawings": {"expense": [("Owner's Drawings", _A.EQUITY)], "income": []},
    "Medical": {"expense": [("General Expenses", _A.EXPENSE)], "income": []},

    "Internal Transfer": {
        "expense": [("Internal Transfers", _A.CURRENT_ASSETS)],
        "income": [("Internal Transfers", _A.CURRENT_ASSETS)],
    },

    # Income
    "Sales": {
        "expense": [],
        "income": [("Sales Ireland 23%", _A.INCOME), ("Other Income", _A.INCOME)],
    },
    "RCT": {"expense": [], "income": [("Sales Ireland 13.5%", _A.INCOME)]},
    "Interest Income": {"expense": [], "income": [("Other Income", _A.INCOME)]},
    "Subscription Income": {"expense": [], "income": [("Sales Ireland 23%", _A.INCOME)]},
}

VAT_RATE_TO_INCOME_ACCOUNT: Dict[str, str] = {
    "Standard 23%": "Sales Ireland 23%",
    "standard_23": "Sales Ireland 23%",
    "Reduced 13.5%": "Sales Ireland 13.5%",
    "reduced_13_5": "Sales Ireland 13.5%",
    "Second Reduced 9%": "Sales Ireland 9%",
    "second_reduced_9": "Sales Ireland 9%",
    "Zero": "Zero Rated Sales",
    "zero_rated": "Zero Rated Sales",
    "Exempt": "Exempt Sales",
    "exempt": "Exempt Sales",
    "Reverse Charge": "Sales Ireland 13.5%",
}


@dataclass(frozen=True)
class AccountSuggestion:
    account_name: str
    account_type: str
    confidence: int


def get_account_suggestion(
    category: str,
    transaction_type: str,
    vat_rate: Optional[str] = None
) -> Optional[AccountSuggestion]:
    """Suggested account for a category, or None when the category is unmapped."""
    if transaction_type == "income" and vat_rate:
        account_name = VAT_RATE_TO_INCOME_ACCOUNT.get(vat_rate)
        if account_name:
            return AccountSuggestion(account_name, AccountType.INCOME, 85)

    mapping = CATEGORY_TO_ACCOUNT_MAP.get(category)
    if not mapping:
        return None

    candidates = mapping["income" if transaction_type == "income" else "expense"]
    if not candidates:
        return None

    name, account_type = candidates[0]
    return AccountSuggestion(name, account_type, 80)
