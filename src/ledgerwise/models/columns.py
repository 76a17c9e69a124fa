"""Column types shared by the ledger tables."""

from sqlalchemy import DateTime

# Stamps are naive UTC and ``occurred_on`` is naive local wall time; the
# column must not demand tzinfo.
NaiveDateTime = DateTime(timezone=False)
