"""
KnockoutDesk GUI styling
"""
