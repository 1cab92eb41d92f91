"""Bank Statement Converter.

Turns the text of a PDF bank statement into a normalized transaction ledger
and serializes it to CSV (and optionally Excel).
"""

__version__ = "1.0.0"
__author__ = "Statement Converter Team"
