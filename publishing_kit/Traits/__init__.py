from .EnumeratesValues import EnumeratesValues
from .Macroable import Macro, Macroable, MacroableMeta, MacroRegistry, macro_registry

__all__ = [
    "EnumeratesValues",
    "Macro",
    "Macroable",
    "MacroableMeta",
    "MacroRegistry",
    "macro_registry",
]
