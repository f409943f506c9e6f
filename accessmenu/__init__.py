"""
AccessMenu ordering core.

Menu browsing, order ledger, customer/staff question handshake and
catalog de-duplication for diners who do not share a language with staff.
"""

__version__ = "1.0.0"
