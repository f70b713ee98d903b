"""Service layer — request building and credential access.

Services may import from domain and config layers.
"""
