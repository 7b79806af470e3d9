from app.analysis.analyzer import Analyzer
from app.analysis.base import BaseAnalyzer
from app.analysis.factory import AnalyzerFactory

__all__ = ["Analyzer", "AnalyzerFactory", "BaseAnalyzer"]

