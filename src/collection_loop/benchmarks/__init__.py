"""
Benchmark states and their variants.
"""
