"""
Maintenance use cases that work on whole data files rather than single
records (normalization, backend migration).
"""
