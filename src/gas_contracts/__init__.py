"""
Gas supply contract consumption reports.

Daily consumption calculation (QDC / QDS), contract deviation checks and
period aggregation for dashboards and the monthly Petrobras report.
"""
