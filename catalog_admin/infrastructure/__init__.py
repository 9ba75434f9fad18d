"""
Couche infrastructure.

Implementations concretes des ports du domaine (persistance du document store).
"""
