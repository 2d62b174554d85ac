"""
Screen package: block target configuration and enforcement boundary.
"""
