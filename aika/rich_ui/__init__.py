"""Rich UI components for aika."""
from .output_writer import ErrorConsole, OutputWriter

__all__ = ['ErrorConsole', 'OutputWriter']
