"""Call-site extraction and call expression building."""

from .builder import CallExpression, CallExpressionBuilder
from .extractor import CallSite, CallSiteExtractor, Parameter

__all__ = [
    "CallExpression",
    "CallExpressionBuilder",
    "CallSite",
    "CallSiteExtractor",
    "Parameter",
]
