"""
App Store ranking snapshot synchronization.
"""
