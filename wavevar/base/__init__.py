"""
Base configuration and common utilities.
"""

from .common_config import CommonConfig
from .utils import validate_input_data, validate_frequency, max_levels

__all__ = ['CommonConfig', 'validate_input_data', 'validate_frequency', 'max_levels']
