"""
Study module - study session state machine and live search filtering.
"""
