"""
Utilities Module
Contains the scheduling, selection, question and gamification algorithms.
"""
