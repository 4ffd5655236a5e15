"""
Version 1 routers.
"""
