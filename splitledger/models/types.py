from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class Amount(TypeDecorator):
    """
    Signed fixed-point ledger amount.

    Values with 18 implied decimals overflow BIGINT, so they are stored as
    decimal strings and handed back to Python as int.
    """

    impl = String(80)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)
