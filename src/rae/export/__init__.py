from .service import AssignmentExportService

__all__ = ["AssignmentExportService"]
