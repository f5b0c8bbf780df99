"""
mzstk - front end for the mzstk stack language

Tokenizes .mzstk programs and builds their block-nested syntax tree.
"""

__version__ = "0.1.0"
__author__ = "mzstk contributors"

from mzstk.parser import parse_file, parse_source
