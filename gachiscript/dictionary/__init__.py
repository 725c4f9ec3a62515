from gachiscript.dictionary.atoms import CATEGORY_PRIORITY, Category, LexicalAtom
from gachiscript.dictionary.reverse_index import Collision, ReverseIndex, build_reverse_index
from gachiscript.dictionary.schema import DictionaryRecord
from gachiscript.dictionary.table import DictionaryError, MappingTable, build_default_table

__all__ = [
    # Atoms
    "Category",
    "CATEGORY_PRIORITY",
    "LexicalAtom",
    # Reverse index
    "Collision",
    "ReverseIndex",
    "build_reverse_index",
    # Table
    "MappingTable",
    "DictionaryError",
    "DictionaryRecord",
    "build_default_table",
]
