"""
Configuration for Resolution Desk
"""
from .settings import DeskConfig, TestingConfig

__all__ = ['DeskConfig', 'TestingConfig']
