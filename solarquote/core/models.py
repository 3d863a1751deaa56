"""
solarquote/core/models.py — Domain Entities

Plain dataclasses for everything the store persists and the document
pipeline consumes. No behavior beyond (de)serialization: the store speaks
camelCase JSON (the shape the settings/quotation documents have always had),
Python code speaks snake_case attributes.

    Entity              Stored as
    ------------------  -----------------------------------------------
    CompanyConfig       settings.company           (object)
    BankConfig          settings.bank              (object)
    WarrantyConfig      settings.warranty          (object)
    ProductPricing      settings.pricing           (array, flat pricing)
    Term                settings.terms             (array)
    BOMTemplate         settings.bom_templates     (array)
    ProductDescription  settings.product_descriptions (array)
    User                settings.users             (array)
    Quotation           quotations.data            (one row per quote)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

ROLES = ("admin", "TL", "user")


def _num(val) -> float:
    """Coerce form/JSON input to a number. Blank or junk counts as zero."""
    if val is None or val == "":
        return 0
    try:
        f = float(val)
    except (TypeError, ValueError):
        return 0
    return int(f) if f.is_integer() else f


def _str(val) -> str:
    return "" if val is None else str(val)


def _dict(val) -> dict:
    return val if isinstance(val, dict) else {}


def _list(val) -> list:
    return val if isinstance(val, list) else []


# ═══════════════════════════════════════════════════════════════════════════════
# Global configuration singletons
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class CompanyConfig:
    name: str = ""
    head_office: str = ""
    regional_office1: str = ""
    regional_office2: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    logo: str = ""   # data URL
    seal: str = ""   # data URL
    gstin: str = ""

    _KEYS = {
        "name": "name", "head_office": "headOffice",
        "regional_office1": "regionalOffice1", "regional_office2": "regionalOffice2",
        "phone": "phone", "email": "email", "website": "website",
        "logo": "logo", "seal": "seal", "gstin": "gstin",
    }

    @classmethod
    def from_dict(cls, d: dict) -> "CompanyConfig":
        d = _dict(d)
        return cls(**{attr: _str(d.get(key, d.get(attr))) for attr, key in cls._KEYS.items()})

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}


@dataclass
class BankConfig:
    company_name: str = ""
    bank_name: str = ""
    account_number: str = ""
    branch: str = ""
    ifsc: str = ""
    address: str = ""
    pan: str = ""
    upi_id: str = ""
    gst_number: str = ""

    _KEYS = {
        "company_name": "companyName", "bank_name": "bankName",
        "account_number": "accountNumber", "branch": "branch", "ifsc": "ifsc",
        "address": "address", "pan": "pan", "upi_id": "upiId",
        "gst_number": "gstNumber",
    }

    @classmethod
    def from_dict(cls, d: dict) -> "BankConfig":
        d = _dict(d)
        return cls(**{attr: _str(d.get(key, d.get(attr))) for attr, key in cls._KEYS.items()})

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}


@dataclass
class WarrantyConfig:
    panel_warranty: str = ""
    inverter_warranty: str = ""
    system_warranty: str = ""
    monitoring_system: str = ""

    _KEYS = {
        "panel_warranty": "panelWarranty", "inverter_warranty": "inverterWarranty",
        "system_warranty": "systemWarranty", "monitoring_system": "monitoringSystem",
    }

    @classmethod
    def from_dict(cls, d: dict) -> "WarrantyConfig":
        d = _dict(d)
        return cls(**{attr: _str(d.get(key, d.get(attr))) for attr, key in cls._KEYS.items()})

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}


@dataclass
class Term:
    id: str
    text: str = ""
    enabled: bool = True
    order: int = 0

    @classmethod
    def from_dict(cls, d: dict) -> "Term":
        d = _dict(d)
        try:
            order = int(d.get("order", 0) or 0)
        except (TypeError, ValueError):
            order = 0
        return cls(id=_str(d.get("id")), text=_str(d.get("text")),
                   enabled=bool(d.get("enabled", True)), order=order)

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "enabled": self.enabled, "order": self.order}


# ═══════════════════════════════════════════════════════════════════════════════
# Bill of materials
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class BOMItem:
    id: str
    product: str = ""
    uom: str = ""
    quantity: str = ""   # free text: "8", "30-40", "As required"
    specification: str = ""
    make: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "BOMItem":
        d = _dict(d)
        return cls(id=_str(d.get("id")), product=_str(d.get("product")),
                   uom=_str(d.get("uom")), quantity=_str(d.get("quantity")),
                   specification=_str(d.get("specification")), make=_str(d.get("make")))

    def to_dict(self) -> dict:
        return {"id": self.id, "product": self.product, "uom": self.uom,
                "quantity": self.quantity, "specification": self.specification,
                "make": self.make}


@dataclass
class BOMTemplate:
    id: str
    name: str = ""
    items: List[BOMItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> "BOMTemplate":
        d = _dict(d)
        return cls(id=_str(d.get("id")), name=_str(d.get("name")),
                   items=[BOMItem.from_dict(i) for i in _list(d.get("items"))])

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "items": [i.to_dict() for i in self.items]}


# ═══════════════════════════════════════════════════════════════════════════════
# Pricing
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class PricingConfig:
    on_grid_system_cost: float = 0
    rooftop_plant_cost: float = 0
    subsidy_amount: float = 0
    kseb_charges: float = 0
    additional_material_cost: float = 0
    customized_structure_cost: float = 0

    _KEYS = {
        "on_grid_system_cost": "onGridSystemCost",
        "rooftop_plant_cost": "rooftopPlantCost",
        "subsidy_amount": "subsidyAmount",
        "kseb_charges": "ksebCharges",
        "additional_material_cost": "additionalMaterialCost",
        "customized_structure_cost": "customizedStructureCost",
    }

    @classmethod
    def from_dict(cls, d: dict) -> "PricingConfig":
        d = _dict(d)
        return cls(**{attr: _num(d.get(key, d.get(attr))) for attr, key in cls._KEYS.items()})

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}

    @property
    def effective_cost(self) -> float:
        """Headline figure: system cost less subsidy. Never clamped."""
        return self.on_grid_system_cost - self.subsidy_amount


@dataclass
class ProductPricing:
    id: str
    name: str = ""
    pricing: PricingConfig = field(default_factory=PricingConfig)

    @classmethod
    def from_dict(cls, d: dict) -> "ProductPricing":
        d = _dict(d)
        # Stored flat ({id, name, onGridSystemCost, ...}) or nested under "pricing"
        src = d.get("pricing") if isinstance(d.get("pricing"), dict) else d
        return cls(id=_str(d.get("id")), name=_str(d.get("name")),
                   pricing=PricingConfig.from_dict(src))

    def to_dict(self) -> dict:
        out = {"id": self.id, "name": self.name}
        out.update(self.pricing.to_dict())
        return out


@dataclass
class ProductDescription:
    id: str
    name: str = ""
    default_pricing_id: str = ""
    default_bom_template_id: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "ProductDescription":
        d = _dict(d)
        return cls(id=_str(d.get("id")), name=_str(d.get("name")),
                   default_pricing_id=_str(d.get("defaultPricingId", d.get("default_pricing_id"))),
                   default_bom_template_id=_str(d.get("defaultBomTemplateId",
                                                      d.get("default_bom_template_id"))))

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name,
                "defaultPricingId": self.default_pricing_id,
                "defaultBomTemplateId": self.default_bom_template_id}


# ═══════════════════════════════════════════════════════════════════════════════
# Users & quotations
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class User:
    id: str
    name: str = ""
    username: str = ""
    password: str = ""
    role: str = "user"

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        d = _dict(d)
        role = _str(d.get("role")) or "user"
        if role not in ROLES:
            role = "user"
        return cls(id=_str(d.get("id")), name=_str(d.get("name")),
                   username=_str(d.get("username")), password=_str(d.get("password")),
                   role=role)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "username": self.username,
                "password": self.password, "role": self.role}


@dataclass
class Quotation:
    id: str
    date: str = ""
    customer_name: str = ""
    discom_number: str = ""
    address: str = ""
    mobile: str = ""
    email: str = ""
    location: str = ""
    pricing: PricingConfig = field(default_factory=PricingConfig)
    bom: List[BOMItem] = field(default_factory=list)
    system_description: str = ""
    created_by: str = ""
    created_by_name: str = ""

    _KEYS = {
        "id": "id", "date": "date", "customer_name": "customerName",
        "discom_number": "discomNumber", "address": "address", "mobile": "mobile",
        "email": "email", "location": "location",
        "system_description": "systemDescription",
        "created_by": "createdBy", "created_by_name": "createdByName",
    }

    @classmethod
    def from_dict(cls, d: dict) -> "Quotation":
        d = _dict(d)
        kw = {attr: _str(d.get(key, d.get(attr))) for attr, key in cls._KEYS.items()}
        kw["pricing"] = PricingConfig.from_dict(d.get("pricing"))
        kw["bom"] = [BOMItem.from_dict(i) for i in _list(d.get("bom"))]
        return cls(**kw)

    def to_dict(self) -> dict:
        out = {key: getattr(self, attr) for attr, key in self._KEYS.items()}
        out["pricing"] = self.pricing.to_dict()
        out["bom"] = [i.to_dict() for i in self.bom]
        return out


@dataclass
class AppState:
    """The whole aggregate: settings singleton + quotation collection."""
    company: CompanyConfig = field(default_factory=CompanyConfig)
    bank: BankConfig = field(default_factory=BankConfig)
    product_pricing: List[ProductPricing] = field(default_factory=list)
    warranty: WarrantyConfig = field(default_factory=WarrantyConfig)
    terms: List[Term] = field(default_factory=list)
    bom_templates: List[BOMTemplate] = field(default_factory=list)
    product_descriptions: List[ProductDescription] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    quotations: List[Quotation] = field(default_factory=list)
    next_id: int = 1001
    settings_version: int = 0

    def find_quotation(self, quote_id: str) -> Optional[Quotation]:
        for q in self.quotations:
            if q.id == quote_id:
                return q
        return None

    def find_user(self, user_id: str) -> Optional[User]:
        for u in self.users:
            if u.id == user_id:
                return u
        return None

    def settings_dict(self) -> dict:
        """Settings columns as stored (quotations live in their own table)."""
        return {
            "company": self.company.to_dict(),
            "bank": self.bank.to_dict(),
            "pricing": [p.to_dict() for p in self.product_pricing],
            "warranty": self.warranty.to_dict(),
            "terms": [t.to_dict() for t in self.terms],
            "bom_templates": [t.to_dict() for t in self.bom_templates],
            "product_descriptions": [p.to_dict() for p in self.product_descriptions],
            "users": [u.to_dict() for u in self.users],
        }

