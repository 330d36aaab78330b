"""
Resolution Desk
Back office API for insolvency professionals and their service providers
"""
__version__ = '1.0.0'
