"""
Catalog operations over the settings aggregate: BOM templates, pricing
packages and the product-description links that pre-fill a quotation.

Links between a ProductDescription and its default pricing/BOM are plain id
correlation, not foreign keys. Lookups return explicit found / not-found
outcomes; a dangling link never raises, it is reported back to the editor.
"""

import copy
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .models import (AppState, BOMItem, BOMTemplate, PricingConfig,
                     ProductDescription, ProductPricing, Quotation, Term)

log = logging.getLogger("solarquote.catalog")


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def copy_items(items: List[BOMItem], id_prefix: str = None) -> List[BOMItem]:
    """Deep copy with fresh ids, unique within the returned list."""
    id_prefix = id_prefix or _new_id()
    return [replace(item, id=f"{id_prefix}-{idx}") for idx, item in enumerate(items)]


# ═══════════════════════════════════════════════════════════════════════════════
# BOM templates
# ═══════════════════════════════════════════════════════════════════════════════

def create_template(name: str = "New BOM Template") -> BOMTemplate:
    return BOMTemplate(id=_new_id(), name=name, items=[])


def duplicate_template(template: BOMTemplate) -> BOMTemplate:
    """Copy named "<name> (Copy)"; every item gets a new id, fields unchanged."""
    new_id = _new_id()
    while new_id == template.id:
        new_id = _new_id()
    return BOMTemplate(id=new_id, name=f"{template.name} (Copy)",
                       items=copy_items(template.items, new_id))


def template_from_items(name: str, items: List[BOMItem]) -> BOMTemplate:
    """Save-as-template from a quotation's BOM editor."""
    new_id = _new_id()
    return BOMTemplate(id=new_id, name=name, items=copy_items(items, new_id))


def find_template(state: AppState, template_id: str) -> Optional[BOMTemplate]:
    if not template_id:
        return None
    for t in state.bom_templates:
        if t.id == template_id:
            return t
    return None


def add_template(state: AppState, template: BOMTemplate) -> AppState:
    return replace(state, bom_templates=state.bom_templates + [template])


def update_template(state: AppState, template: BOMTemplate) -> AppState:
    return replace(state, bom_templates=[
        template if t.id == template.id else t for t in state.bom_templates])


def delete_template(state: AppState, template_id: str) -> AppState:
    return replace(state, bom_templates=[t for t in state.bom_templates if t.id != template_id])


# ═══════════════════════════════════════════════════════════════════════════════
# Pricing packages
# ═══════════════════════════════════════════════════════════════════════════════

def create_pricing(name: str = "New Product Pricing") -> ProductPricing:
    return ProductPricing(id=_new_id(), name=name, pricing=PricingConfig())


def find_pricing(state: AppState, pricing_id: str) -> Optional[ProductPricing]:
    if not pricing_id:
        return None
    for p in state.product_pricing:
        if p.id == pricing_id:
            return p
    return None


def create_description(name: str = "New System Description") -> ProductDescription:
    return ProductDescription(id=_new_id(), name=name)


def find_description(state: AppState, name: str) -> Optional[ProductDescription]:
    for d in state.product_descriptions:
        if d.name == name:
            return d
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Terms
# ═══════════════════════════════════════════════════════════════════════════════

def create_term(state: AppState, text: str = "New Term") -> Term:
    return Term(id=_new_id(), text=text, enabled=True, order=len(state.terms) + 1)


# ═══════════════════════════════════════════════════════════════════════════════
# Auto-population from a product description
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ProductDefaults:
    """Outcome of resolving a description's links."""
    description: Optional[ProductDescription] = None
    pricing: Optional[ProductPricing] = None
    template: Optional[BOMTemplate] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def pricing_found(self) -> bool:
        return self.pricing is not None

    @property
    def bom_found(self) -> bool:
        return self.template is not None


def resolve_product_defaults(state: AppState, description_name: str) -> ProductDefaults:
    out = ProductDefaults(description=find_description(state, description_name))
    desc = out.description
    if desc is None:
        return out

    out.pricing = find_pricing(state, desc.default_pricing_id)
    if desc.default_pricing_id and out.pricing is None:
        out.warnings.append(
            f"Pricing package '{desc.default_pricing_id}' linked to '{desc.name}' "
            f"no longer exists; pricing left unchanged.")

    out.template = find_template(state, desc.default_bom_template_id)
    if desc.default_bom_template_id and out.template is None:
        out.warnings.append(
            f"BOM template '{desc.default_bom_template_id}' linked to '{desc.name}' "
            f"no longer exists; BOM left unchanged.")

    for w in out.warnings:
        log.warning(w)
    return out


def apply_product_defaults(quotation: Quotation, description_name: str,
                           state: AppState) -> tuple:
    """Set the system description and overwrite pricing/BOM from its links.

    Each link that resolves replaces the quotation's value with a snapshot;
    unresolved links leave it untouched. Returns (new_quotation, outcome).
    """
    outcome = resolve_product_defaults(state, description_name)
    updated = replace(quotation, system_description=description_name)
    if outcome.pricing_found:
        updated = replace(updated, pricing=copy.deepcopy(outcome.pricing.pricing))
    if outcome.bom_found:
        updated = replace(updated, bom=copy_items(outcome.template.items))
    return updated, outcome
