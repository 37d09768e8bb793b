"""Allow running aika as ``python -m aika``."""
from .main import cli

cli()
