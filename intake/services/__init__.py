# intake/services/__init__.py
"""
Pipeline stages: origin guard, honeypot, validation, bot verification,
payload normalization and upstream delivery, plus the gateway that chains them.
"""
