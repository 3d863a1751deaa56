"""
Quotation → document model.

The only place where a quotation meets the global settings. Everything the
renderer needs is copied into the model, so later edits to settings never
reach a document that has already been assembled.
"""

import copy
from dataclasses import dataclass, field
from typing import Iterable, List

from ..core.models import (AppState, BankConfig, CompanyConfig, Quotation,
                           Term, WarrantyConfig)


@dataclass
class DocumentModel:
    quotation: Quotation
    company: CompanyConfig = field(default_factory=CompanyConfig)
    bank: BankConfig = field(default_factory=BankConfig)
    warranty: WarrantyConfig = field(default_factory=WarrantyConfig)
    terms: List[Term] = field(default_factory=list)   # enabled, in print order


def active_terms(terms: Iterable[Term]) -> List[Term]:
    """Enabled terms by ascending order; equal orders keep their list position."""
    return sorted((t for t in terms if t.enabled), key=lambda t: t.order)


def assemble_document(quotation: Quotation, state: AppState) -> DocumentModel:
    return DocumentModel(
        quotation=copy.deepcopy(quotation),
        company=copy.deepcopy(state.company),
        bank=copy.deepcopy(state.bank),
        warranty=copy.deepcopy(state.warranty),
        terms=[copy.deepcopy(t) for t in active_terms(state.terms)],
    )
