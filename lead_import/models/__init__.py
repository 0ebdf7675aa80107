"""Domain models for the lead import tool.

Column mapping, lead records, row errors, import outcome and configuration.
"""

from .columns import DEFAULT_MAPPING, ColumnMapping, TemplateColumn, UnknownColumnError
from .config_models import DatabaseConfig, ImportConfig, SupabaseConfig
from .error_record import ErrorRecord, RowError
from .import_result import ImportOutcome, ImportState, ImportStatus
from .lead import LeadStatus, NormalizedLead, RawRow

__all__ = [
    # Column mapping
    "ColumnMapping",
    "DEFAULT_MAPPING",
    "TemplateColumn",
    "UnknownColumnError",
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    "SupabaseConfig",
    # Processing models
    "ErrorRecord",
    "ImportOutcome",
    "ImportState",
    "ImportStatus",
    "LeadStatus",
    "NormalizedLead",
    "RawRow",
    "RowError",
]
