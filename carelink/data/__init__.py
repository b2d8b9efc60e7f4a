"""Static data and lookup tables."""

from carelink.data.fees import get_consultation_fee, get_medication_cost, compute_bill_totals
from carelink.data.medicines import MEDICINE_CATALOGUE

__all__ = ["get_consultation_fee", "get_medication_cost", "compute_bill_totals", "MEDICINE_CATALOGUE"]
