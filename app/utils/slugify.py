import re
from unidecode import unidecode


def slugify(text):
    text = unidecode(text).lower()
    text = re.sub(r'[^a-z0-9]+', '-', text).strip('-')
    return text


def machine_name(text, max_length=63):
    """Turn a label into a column-safe identifier ("Featured Image" -> "featured_image")."""
    text = unidecode(text or "").lower()
    text = re.sub(r'[^a-z0-9]+', '_', text).strip('_')
    if text and not text[0].isalpha():
        text = f"field_{text}"
    return text[:max_length].rstrip('_')
