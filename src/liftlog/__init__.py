"""
liftlog: workout session tracker.

Times training sessions and individual exercises, records sets from draft
input rows, and keeps personal records with one-rep-max estimation.
"""

__version__ = "0.1.0"
