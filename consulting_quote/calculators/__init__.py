"""
Deterministic quote calculation.

Pure Python math over read-only pricing tables.
Given a BusinessProfile, produce a QuoteResult with the monthly fee,
its itemised breakdown, the complexity factors and the included services.
"""
