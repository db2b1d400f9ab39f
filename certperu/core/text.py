# certperu/core/text.py
import re
import unicodedata

def slugify(value: str) -> str:
    """'Gestión Pública 2024' -> 'gestion-publica-2024'"""
    normalized = unicodedata.normalize("NFD", (value or "").lower())
    no_accents = "".join(c for c in normalized if unicodedata.category(c) != "Mn")
    return re.sub(r"[^a-z0-9]+", "-", no_accents).strip("-")

def mask_document(number: str | None, visible: int = 4) -> str:
    # prefijo fijo; nunca se muestra el número completo
    if not number:
        return "****"
    shown = min(visible, len(number) - 1)
    return f"****{number[-shown:]}" if shown > 0 else "****"

def like_pattern(term: str) -> str:
    return f"%{term.strip()}%"
