"""Medicine catalogue offered to prescribers, with pharmacy unit costs."""

from typing import Dict, List

# Unit cost is the price of one counted unit (tablet, capsule, vial, inhaler...)
MEDICINE_CATALOGUE: List[Dict] = [
    # Pain Relief
    {"id": "med001", "name": "Paracetamol 500mg", "category": "Pain Relief", "dosage": "500mg", "form": "Tablet", "unit_cost": 0.5},
    {"id": "med002", "name": "Ibuprofen 400mg", "category": "Pain Relief", "dosage": "400mg", "form": "Tablet", "unit_cost": 0.8},
    {"id": "med003", "name": "Aspirin 75mg", "category": "Pain Relief", "dosage": "75mg", "form": "Tablet", "unit_cost": 0.3},
    {"id": "med004", "name": "Diclofenac 50mg", "category": "Pain Relief", "dosage": "50mg", "form": "Tablet", "unit_cost": 1.2},
    # Antibiotics
    {"id": "med005", "name": "Amoxicillin 250mg", "category": "Antibiotics", "dosage": "250mg", "form": "Capsule", "unit_cost": 2.5},
    {"id": "med006", "name": "Amoxicillin 500mg", "category": "Antibiotics", "dosage": "500mg", "form": "Capsule", "unit_cost": 3.8},
    {"id": "med007", "name": "Azithromycin 500mg", "category": "Antibiotics", "dosage": "500mg", "form": "Tablet", "unit_cost": 6.5},
    {"id": "med008", "name": "Ciprofloxacin 500mg", "category": "Antibiotics", "dosage": "500mg", "form": "Tablet", "unit_cost": 4.2},
    {"id": "med009", "name": "Cephalexin 500mg", "category": "Antibiotics", "dosage": "500mg", "form": "Capsule", "unit_cost": 3.5},
    # Cardiovascular
    {"id": "med010", "name": "Lisinopril 10mg", "category": "Cardiovascular", "dosage": "10mg", "form": "Tablet", "unit_cost": 1.5},
    {"id": "med011", "name": "Amlodipine 5mg", "category": "Cardiovascular", "dosage": "5mg", "form": "Tablet", "unit_cost": 1.2},
    {"id": "med012", "name": "Metoprolol 25mg", "category": "Cardiovascular", "dosage": "25mg", "form": "Tablet", "unit_cost": 1.4},
    {"id": "med013", "name": "Atorvastatin 20mg", "category": "Cardiovascular", "dosage": "20mg", "form": "Tablet", "unit_cost": 2.2},
    # Diabetes
    {"id": "med014", "name": "Metformin 500mg", "category": "Diabetes", "dosage": "500mg", "form": "Tablet", "unit_cost": 0.9},
    {"id": "med015", "name": "Metformin 850mg", "category": "Diabetes", "dosage": "850mg", "form": "Tablet", "unit_cost": 1.3},
    {"id": "med016", "name": "Glimepiride 2mg", "category": "Diabetes", "dosage": "2mg", "form": "Tablet", "unit_cost": 1.6},
    {"id": "med017", "name": "Insulin Glargine", "category": "Diabetes", "dosage": "100 units/mL", "form": "Injection", "unit_cost": 45.0},
    # Respiratory
    {"id": "med018", "name": "Salbutamol Inhaler", "category": "Respiratory", "dosage": "100mcg/dose", "form": "Inhaler", "unit_cost": 12.0},
    {"id": "med019", "name": "Prednisolone 5mg", "category": "Respiratory", "dosage": "5mg", "form": "Tablet", "unit_cost": 0.7},
    {"id": "med020", "name": "Montelukast 10mg", "category": "Respiratory", "dosage": "10mg", "form": "Tablet", "unit_cost": 2.8},
    # Gastrointestinal
    {"id": "med021", "name": "Omeprazole 20mg", "category": "Gastrointestinal", "dosage": "20mg", "form": "Capsule", "unit_cost": 1.1},
    {"id": "med022", "name": "Pantoprazole 40mg", "category": "Gastrointestinal", "dosage": "40mg", "form": "Tablet", "unit_cost": 1.6},
    {"id": "med023", "name": "Domperidone 10mg", "category": "Gastrointestinal", "dosage": "10mg", "form": "Tablet", "unit_cost": 0.9},
    {"id": "med024", "name": "Loperamide 2mg", "category": "Gastrointestinal", "dosage": "2mg", "form": "Tablet", "unit_cost": 0.6},
    # Mental Health
    {"id": "med025", "name": "Sertraline 50mg", "category": "Mental Health", "dosage": "50mg", "form": "Tablet", "unit_cost": 2.4},
    {"id": "med026", "name": "Fluoxetine 20mg", "category": "Mental Health", "dosage": "20mg", "form": "Capsule", "unit_cost": 1.9},
    {"id": "med027", "name": "Lorazepam 1mg", "category": "Mental Health", "dosage": "1mg", "form": "Tablet", "unit_cost": 1.7},
    # Emergency
    {"id": "med028", "name": "Adrenaline 1mg/mL", "category": "Emergency", "dosage": "1mg/mL", "form": "Injection", "unit_cost": 15.0},
    {"id": "med029", "name": "Atropine 1mg/mL", "category": "Emergency", "dosage": "1mg/mL", "form": "Injection", "unit_cost": 12.5},
    {"id": "med030", "name": "Furosemide 40mg", "category": "Emergency", "dosage": "40mg", "form": "Tablet", "unit_cost": 1.0},
    {"id": "med031", "name": "Morphine 10mg/mL", "category": "Emergency", "dosage": "10mg/mL", "form": "Injection", "unit_cost": 18.0},
    # Vitamins
    {"id": "med032", "name": "Vitamin D3 1000 IU", "category": "Vitamins", "dosage": "1000 IU", "form": "Tablet", "unit_cost": 0.4},
    {"id": "med033", "name": "Vitamin B12 1000mcg", "category": "Vitamins", "dosage": "1000mcg", "form": "Tablet", "unit_cost": 0.6},
    {"id": "med034", "name": "Folic Acid 5mg", "category": "Vitamins", "dosage": "5mg", "form": "Tablet", "unit_cost": 0.3},
    {"id": "med035", "name": "Iron 65mg", "category": "Vitamins", "dosage": "65mg", "form": "Tablet", "unit_cost": 0.35},
]

MEDICATION_UNIT_COSTS: Dict[str, float] = {
    med["name"]: med["unit_cost"] for med in MEDICINE_CATALOGUE
}


def search_medicines(search_term: str) -> List[Dict]:
    """Case-insensitive match on medicine name or category."""
    term = search_term.lower().strip()
    return [
        med for med in MEDICINE_CATALOGUE
        if term in med["name"].lower() or term in med["category"].lower()
    ]


def get_medicines_by_category(category: str) -> List[Dict]:
    return [med for med in MEDICINE_CATALOGUE if med["category"] == category]


def get_medicine_categories() -> List[str]:
    """Distinct categories in catalogue order."""
    categories: List[str] = []
    for med in MEDICINE_CATALOGUE:
        if med["category"] not in categories:
            categories.append(med["category"])
    return categories
