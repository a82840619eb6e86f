"""
Core validation domain: models, tier configuration, field mapping and validators.
"""
