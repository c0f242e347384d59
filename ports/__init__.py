from .sheets import SheetReaderPort
from .sink import MutationSinkPort

__all__ = [
    "SheetReaderPort",
    "MutationSinkPort",
]
