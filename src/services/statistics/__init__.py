"""
Statistics Service: Дневные счётчики активности.
"""
