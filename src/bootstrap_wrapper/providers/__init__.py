"""
Cloud provider implementations used by the harness.
"""
