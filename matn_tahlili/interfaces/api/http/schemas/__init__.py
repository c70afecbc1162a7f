from .analysis import AnalyzeRes, CorrectionDTO, RunDTO, to_analyze_res
from .export import ExportReq

__all__ = ["AnalyzeRes", "CorrectionDTO", "ExportReq", "RunDTO", "to_analyze_res"]
