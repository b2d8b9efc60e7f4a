"""Consultation fees, medication costs and bill arithmetic."""

import re
from typing import Dict, Iterable, NamedTuple, Tuple

from carelink.data.medicines import MEDICATION_UNIT_COSTS

TAX_RATE = 0.10
GLOBAL_DEFAULT_FEE = 100.0
DEFAULT_MEDICATION_COST = 2.0

# Consultation fee by appointment type, then department.
# Lookup order: type/department -> type/"default" -> GLOBAL_DEFAULT_FEE
CONSULTATION_FEES: Dict[str, Dict[str, float]] = {
    "Consultation": {
        "Cardiology": 150.0,
        "Neurology": 160.0,
        "Orthopedics": 130.0,
        "Pediatrics": 90.0,
        "Dermatology": 110.0,
        "Oncology": 180.0,
        "Psychiatry": 140.0,
        "General Medicine": 80.0,
        "default": 100.0,
    },
    "Follow-up": {
        "Cardiology": 90.0,
        "Neurology": 100.0,
        "Oncology": 110.0,
        "default": 60.0,
    },
    "Check-up": {
        "Pediatrics": 60.0,
        "Cardiology": 120.0,
        "default": 75.0,
    },
    "Emergency": {
        "Emergency Medicine": 250.0,
        "Cardiology": 300.0,
        "default": 200.0,
    },
    "Procedure": {
        "Surgery": 500.0,
        "Orthopedics": 400.0,
        "Radiology": 220.0,
        "default": 300.0,
    },
}


class BillTotals(NamedTuple):
    subtotal: float
    tax: float
    discount: float
    total_amount: float


def get_consultation_fee(appointment_type: str, department: str) -> float:
    """Fee for an appointment type in a department, with fallbacks."""
    fees_for_type = CONSULTATION_FEES.get(appointment_type)
    if fees_for_type is None:
        return GLOBAL_DEFAULT_FEE

    if department in fees_for_type:
        return fees_for_type[department]

    return fees_for_type.get("default", GLOBAL_DEFAULT_FEE)


def get_medication_cost(name: str) -> float:
    """Unit cost of a medication by its catalogue name."""
    return MEDICATION_UNIT_COSTS.get(name.strip(), DEFAULT_MEDICATION_COST)


_COUNT_WITH_UNIT = re.compile(r"^(\d+)\s+(\S.*)$")
_BARE_COUNT = re.compile(r"^(\d+)$")


def parse_quantity(text: str) -> Tuple[int, str]:
    """
    Interpret a prescribed quantity as ``(count, unit)``.

    "14 capsules" -> (14, "capsules"); "28" -> (28, "unit");
    "10mL vial" / "1 bottle" style packs -> one of the described item.
    """
    cleaned = " ".join(text.split())

    match = _COUNT_WITH_UNIT.match(cleaned)
    if match:
        return int(match.group(1)), match.group(2)

    match = _BARE_COUNT.match(cleaned)
    if match:
        return int(match.group(1)), "unit"

    return 1, cleaned or "unit"


def compute_bill_totals(
    services: Iterable[dict],
    medications: Iterable[dict],
    discount: float = 0.0,
) -> BillTotals:
    """
    Compute subtotal, tax and total for bill line items.

    Services carry ``cost``; medications carry a unit ``cost`` and an integer
    ``quantity``. Tax is charged on the rounded subtotal before any discount.
    """
    subtotal = sum(service["cost"] for service in services)
    subtotal += sum(med["cost"] * med["quantity"] for med in medications)
    subtotal = round(subtotal, 2)
    tax = round(subtotal * TAX_RATE, 2)
    discount = round(discount, 2)

    # Stored figures always add up: total == subtotal + tax - discount
    return BillTotals(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total_amount=round(subtotal + tax - discount, 2),
    )
