"""
Application level routes
"""
