"""Tax calculation engines. Pure functions over Decimal money, no I/O."""
