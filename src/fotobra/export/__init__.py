"""Archive layout helpers for classified photos."""

from .paths import (
    CATEGORIA_NAO_INFORMADA,
    EMPRESA_NAO_INFORMADA,
    ExportPathInput,
    build_export_path,
    build_simple_export_path,
    compute_year_month_day,
    infer_empresa_from_folder,
    safe_segment,
)
from .plan import ExportEntry, plan_export

__all__ = [
    "CATEGORIA_NAO_INFORMADA",
    "EMPRESA_NAO_INFORMADA",
    "ExportEntry",
    "ExportPathInput",
    "build_export_path",
    "build_simple_export_path",
    "compute_year_month_day",
    "infer_empresa_from_folder",
    "plan_export",
    "safe_segment",
]
