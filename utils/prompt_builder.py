"""Prompt construction for coffee product extraction."""
from typing import Optional


DEFAULT_TEMPLATE = """
  Du bist ein Experte für Kaffeeprodukte (Deutsch und Englisch).
  Extrahiere die folgenden Attribute aus der Produktbeschreibung, falls vorhanden:
  - Preis in EUR ohne Wärhungszeichen
  - Gewicht in Gramm ohne Einheit
  - Geschmacksnoten
  - Aufbereitung (Processing)
  - Farmer / Produzent

  Rückgabe im JSON-Format mit den Schlüsseln:
  { "price": "...", "weight": "...", "flavor": "...", "processing": "...", "farmer": "..." }
  Wenn ein Wert fehlt, verwende null.
  """.strip()

SOURCE_HEADER = "Produktbeschreibung:"
SOURCE_DELIMITER = '"""'


def select_template(template_override: Optional[str] = None) -> str:
    """Return the trimmed override, or the default template when it is blank."""
    if template_override is not None:
        override = str(template_override).strip()
        if override:
            return override
    return DEFAULT_TEMPLATE


def build_prompt(source_text: str, template_override: Optional[str] = None) -> str:
    base = select_template(template_override)
    return f"{base}\n\n{SOURCE_HEADER}\n{SOURCE_DELIMITER}{source_text}{SOURCE_DELIMITER}\n"
