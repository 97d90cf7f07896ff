"""Bank Statement Summary Mailer.

Reads bank statement CSV exports, computes total balance, average debit and
credit amounts and per-month transaction counts, and emails the result.
"""

__version__ = "1.0.0"
__author__ = "Statement Processing Team"
