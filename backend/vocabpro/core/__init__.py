"""
Core Module
FastAPI dependency wiring.
"""
