"""
VocabPro Core
Spaced-repetition vocabulary practice: review scheduling, adaptive
selection, progress tracking, daily goals and durable learner state.
"""
__version__ = "1.0.0"
