"""
Built-in settings used on a fresh install, and whenever a settings column
comes back absent or empty from the store.

Kept as raw stored-shape dicts so the same normalizer that reads the database
also reads these; callers get fresh objects on every call.
"""

import copy

from .models import (AppState, BankConfig, BOMTemplate, CompanyConfig,
                     ProductDescription, ProductPricing, Term, User,
                     WarrantyConfig)

DEFAULT_COMPANY = {
    "name": "Kondaas Automation Pvt Ltd",
    "headOffice": "123, Solar Plaza, Opp. KSEB, Kochi, Kerala",
    "regionalOffice1": "Branch Office, Trivandrum, Kerala",
    "regionalOffice2": "Service Center, Calicut, Kerala",
    "phone": "+91 9876543210",
    "email": "info@kondaas.com",
    "website": "www.kondaas.com",
    "logo": "",
    "seal": "",
    "gstin": "32AAAAA0000A1Z5",
}

DEFAULT_BANK = {
    "companyName": "Kondaas Automation Private Limited",
    "bankName": "HDFC BANK",
    "accountNumber": "50200012345678",
    "branch": "Cochin Main",
    "ifsc": "HDFC0000123",
    "address": "M.G. Road, Cochin",
    "pan": "ABCDE1234F",
    "upiId": "kondaas@hdfc",
    "gstNumber": "32AAAAA0000A1Z5",
}

DEFAULT_WARRANTY = {
    "panelWarranty": "25 Years Performance Warranty (Adani Solar)",
    "inverterWarranty": "5 to 10 Years Product Warranty (On-Grid String)",
    "systemWarranty": "5 Years Free Service (Kondaas Automation)",
    "monitoringSystem": "Standard Online Monitoring (Wi-Fi Required)",
}

DEFAULT_TERMS = [
    {"id": "1", "text": "Structure height will be 1 to 3 feet from floor level.", "enabled": True, "order": 1},
    {"id": "2", "text": "KSEB application & registration charges are included in the above cost.", "enabled": True, "order": 2},
    {"id": "3", "text": "The customer shall provide necessary space and shadow-free area for installation.", "enabled": True, "order": 3},
    {"id": "4", "text": "Civil works like concrete foundation if needed will be extra.", "enabled": True, "order": 4},
    {"id": "5", "text": "The subsidy will be credited to the customer account as per govt norms.", "enabled": True, "order": 5},
    {"id": "6", "text": "Any additional cabling beyond 30 meters will be charged extra.", "enabled": True, "order": 6},
]

DEFAULT_BOM_3KW = [
    {"id": "1", "product": "Solar Panels", "uom": "Nos", "quantity": "8", "specification": "550Wp Mono PERC", "make": "Adani/Waaree"},
    {"id": "2", "product": "On-Grid Inverter", "uom": "No", "quantity": "1", "specification": "3kW String Inverter", "make": "Growatt/Solis"},
    {"id": "3", "product": "DC SPD", "uom": "Nos", "quantity": "2", "specification": "Type II 600V", "make": "Citel/Suntree"},
    {"id": "4", "product": "DC Fuse", "uom": "Nos", "quantity": "2", "specification": "15A/1000V", "make": "Mersen"},
    {"id": "5", "product": "DC Cable", "uom": "Mtrs", "quantity": "30", "specification": "4sqmm multi strand", "make": "Polycab/Siechem"},
    {"id": "10", "product": "Lightning Arrester", "uom": "Set", "quantity": "1", "specification": "Solid Copper 1M", "make": "Standard"},
]

DEFAULT_PRICING = [
    {"id": "p3kw", "name": "3kW Standard Pricing",
     "onGridSystemCost": 185000, "rooftopPlantCost": 185000, "subsidyAmount": 78000,
     "ksebCharges": 0, "additionalMaterialCost": 0, "customizedStructureCost": 0},
    {"id": "p5kw", "name": "5kW Standard Pricing",
     "onGridSystemCost": 295000, "rooftopPlantCost": 295000, "subsidyAmount": 78000,
     "ksebCharges": 0, "additionalMaterialCost": 0, "customizedStructureCost": 0},
]

DEFAULT_BOM_TEMPLATES = [
    {"id": "3kw-std", "name": "3kW Standard On-Grid", "items": DEFAULT_BOM_3KW},
]

DEFAULT_PRODUCT_DESCRIPTIONS = [
    {"id": "1", "name": "3kW ON-GRID SOLAR POWER GENERATING SYSTEM",
     "defaultPricingId": "p3kw", "defaultBomTemplateId": "3kw-std"},
    {"id": "2", "name": "5kW ON-GRID SOLAR POWER GENERATING SYSTEM",
     "defaultPricingId": "p5kw", "defaultBomTemplateId": ""},
    {"id": "3", "name": "10kW ON-GRID SOLAR POWER GENERATING SYSTEM",
     "defaultPricingId": "", "defaultBomTemplateId": ""},
]

DEFAULT_USERS = [
    {"id": "admin", "name": "Administrator", "username": "admin",
     "password": "admin123", "role": "admin"},
]

# Sequence floor: the first quotation on a fresh install gets FLOOR + 1
ID_SEQUENCE_FLOOR = 1000


def default_settings() -> dict:
    """Stored-shape settings columns, deep-copied."""
    return copy.deepcopy({
        "company": DEFAULT_COMPANY,
        "bank": DEFAULT_BANK,
        "pricing": DEFAULT_PRICING,
        "warranty": DEFAULT_WARRANTY,
        "terms": DEFAULT_TERMS,
        "bom_templates": DEFAULT_BOM_TEMPLATES,
        "product_descriptions": DEFAULT_PRODUCT_DESCRIPTIONS,
        "users": DEFAULT_USERS,
    })


def initial_state() -> AppState:
    s = default_settings()
    return AppState(
        company=CompanyConfig.from_dict(s["company"]),
        bank=BankConfig.from_dict(s["bank"]),
        product_pricing=[ProductPricing.from_dict(p) for p in s["pricing"]],
        warranty=WarrantyConfig.from_dict(s["warranty"]),
        terms=[Term.from_dict(t) for t in s["terms"]],
        bom_templates=[BOMTemplate.from_dict(t) for t in s["bom_templates"]],
        product_descriptions=[ProductDescription.from_dict(p) for p in s["product_descriptions"]],
        users=[User.from_dict(u) for u in s["users"]],
        quotations=[],
        next_id=ID_SEQUENCE_FLOOR + 1,
    )
