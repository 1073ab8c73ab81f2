"""
Webhook Layer

Inbound pull_request event validation.
"""

from .validator import PayloadValidator, ValidationResult

__all__ = ['PayloadValidator', 'ValidationResult']
