"""
RegClear: Regulatory classification and compliance drafting for AI products

This package maps a described AI product onto the AI and data-protection
regimes of its target markets, classifies it into a risk tier per
jurisdiction, and drafts the compliance documents those regimes require.
"""

__version__ = "0.1.0"
__author__ = "RegClear Team"

from regclear.config import get_settings

__all__ = ["get_settings", "__version__"]
