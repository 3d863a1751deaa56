"""
Solar Quote Pro — quotation authoring and proposal documents

Packages:
    api/        Dashboard routes and templates
    forms/      Document assembly, layout and export (HTML, PDF, XLSX)
    core/       Domain model, settings store, configuration and paths
"""

__version__ = "1.0.0"
