from typing import Dict, List

OTHER = "Other"

# Why members call, in three strategic buckets
NEED_CATEGORY_MAP: Dict[str, str] = {
    "Address update": "Routine admin",
    "Tax form request": "Routine admin",
    "Pension balance inquiry": "Benefit decision",
    "Benefit start date": "Benefit decision",
    "Retirement estimate": "Benefit decision",
    "Spouse benefit": "Benefit decision",
    "Contribution change": "Benefit decision",
    "Transfer in/out": "Benefit decision",
    "Complaint - delay": "Service failure",
    "Complaint - incorrect amount": "Service failure",
}

NEED_CATEGORY_ORDER: List[str] = ["Benefit decision", "Routine admin", "Service failure", OTHER]


def need_category(intent: str) -> str:
    return NEED_CATEGORY_MAP.get(intent, OTHER)
