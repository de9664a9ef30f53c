"""
Recall - spaced repetition review engine.

The SM-2 scheduler lives in ``recall.sm2``.
"""
