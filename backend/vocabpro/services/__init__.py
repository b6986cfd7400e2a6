"""
Services Module
State storage, the learning catalog and quiz sessions.
"""
