from .analyze_document import AnalyzeDocumentUseCase
from .export_runs import ExportedFile, ExportRunsUseCase

__all__ = ["AnalyzeDocumentUseCase", "ExportedFile", "ExportRunsUseCase"]
