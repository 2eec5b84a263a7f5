from .equity_tool import EquityTool, HandAnalysis

__all__ = ["EquityTool", "HandAnalysis"]
