"""
Program Tracker
Blueprint registry.
"""
