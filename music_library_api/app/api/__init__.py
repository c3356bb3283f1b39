"""
API package containing versioned routes and their dependencies.
"""
