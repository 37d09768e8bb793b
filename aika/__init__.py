"""
aika - send local text through a prompt template to an AI provider.
"""
from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION

__version__ = APP_VERSION
__all__ = ['APP_NAME', 'APP_VERSION', 'APP_DESCRIPTION']
