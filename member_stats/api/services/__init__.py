"""
Services for member statistics.
"""
