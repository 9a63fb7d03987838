"""cps_labor package initializer.

This package contains the CPS labor statistics pipeline: the Census API
client, typed record batches, cohort filters, weighted statistics, grouped
aggregation by industry/occupation, and report assembly.  See individual
module docstrings for details.
"""
