"""
Managers Module
One manager per section of the learner state, all sharing one AppStateStore.
"""
