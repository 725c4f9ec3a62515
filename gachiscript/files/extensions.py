"""File extensions for GachiScript artifacts."""

import re

from gachiscript.transpiler.parser import contains_markup

GACHI_EXTENSION = ".gachi"
HOST_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")

# Syntax only TypeScript has: annotations, interfaces, type aliases, generics.
_TYPE_SYNTAX = re.compile(
    r"\binterface\s+[A-Za-z_$]"
    r"|\btype\s+[A-Za-z_$][\w$]*\s*(?:<[^>]*>)?\s*="
    r"|[\w$)\]]\s*:\s*(?:string|number|boolean|any|void|unknown|never)\b"
    r"|\b(?:public|private|protected|readonly)\s+[A-Za-z_$]"
    r"|\bas\s+(?:const|string|number|boolean|any|unknown)\b"
)


def has_type_syntax(code: str) -> bool:
    return _TYPE_SYNTAX.search(code) is not None


def guess_original_extension(code: str) -> str:
    """Guess the host extension of reverse-transformed code.

    Markup means .tsx when type syntax is present too, .jsx otherwise;
    type syntax alone means .ts; anything else is .js.
    """
    markup = contains_markup(code)
    typed = has_type_syntax(code)
    if markup:
        return ".tsx" if typed else ".jsx"
    if typed:
        return ".ts"
    return ".js"
