"""
tiersale: settlement core of a tiered-rate token sale
"""

__version__ = "0.1.0"
