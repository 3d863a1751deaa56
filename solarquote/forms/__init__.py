"""Proposal document assembly, layout and export.

Key exports:
    assemble_document()       — Merge a quotation with global settings
    render_document()         — Four-page layout shared by every target
    render_html()             — Screen / print markup
    export_pdf()              — A4 PDF via reportlab
    export_quotation_xlsx()   — Per-quotation workbook
    export_master_report()    — Whole-collection workbook
"""
