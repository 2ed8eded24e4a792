"""Daily volume formulas and contract deviation checks."""
