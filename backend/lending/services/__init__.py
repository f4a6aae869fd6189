# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import book_service
from . import loan_ledger
from . import stock_audit_service
from . import user_service

__all__ = [
    "book_service",
    "loan_ledger",
    "stock_audit_service",
    "user_service",
]
