"""Ward types, bed capacities and admission routing."""

from typing import Dict

WARD_TYPES: Dict[str, Dict] = {
    "emergency": {"label": "Emergency Ward", "capacity": 20},
    "icu": {"label": "ICU", "capacity": 12},
    "general": {"label": "General Ward", "capacity": 50},
    "private": {"label": "Private Room", "capacity": 25},
    "pediatric": {"label": "Pediatric Ward", "capacity": 30},
    "maternity": {"label": "Maternity Ward", "capacity": 20},
    "surgical": {"label": "Surgical Ward", "capacity": 35},
    "cardiac": {"label": "Cardiac Unit", "capacity": 15},
    "neuro": {"label": "Neurology Ward", "capacity": 18},
    "ortho": {"label": "Orthopedic Ward", "capacity": 22},
}

# Admission type -> how medicines reach the patient
ADMISSION_DELIVERY_TYPES: Dict[str, str] = {
    "emergency": "bedside",
    "planned": "bedside",
    "transfer": "bedside",
    "outpatient": "pharmacy",
}


def bed_prefix(ward_type: str) -> str:
    """ICU-004 style prefix for a ward type."""
    return ward_type.upper()[:3]
