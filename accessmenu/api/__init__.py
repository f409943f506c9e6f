"""
API routers for the AccessMenu ordering core
"""
