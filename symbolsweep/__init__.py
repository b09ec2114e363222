"""
SymbolSweep - monitor and safely clean the coresymbolicationd cache.
"""

VERSION = "0.1.0"
__version__ = VERSION
