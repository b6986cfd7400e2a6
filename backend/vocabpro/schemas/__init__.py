"""
API Schemas
Request and response models of the REST API.
"""
