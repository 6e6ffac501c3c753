"""Allow `python -m deliberate_thinking`."""
from .server import run

run()
