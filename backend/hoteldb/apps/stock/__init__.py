"""
Stock module.

Item masters and dated receipt/issue transactions for hotel consumables and
laundry linen, with balances always summed from the transaction log.
"""

from . import models, schemas, services  # noqa: F401
