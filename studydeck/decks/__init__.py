"""
Decks module - deck and card ownership, mutation and persistence.
"""
