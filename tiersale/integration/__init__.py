"""
Host integration layer for the sale kernel
"""

from .clock import Clock, ManualClock
from .config import load_sale_config, sale_config_from_dict, sale_config_to_dict
from .crowdsale import Crowdsale

__all__ = [
    "Clock",
    "ManualClock",
    "Crowdsale",
    "load_sale_config",
    "sale_config_from_dict",
    "sale_config_to_dict",
]
