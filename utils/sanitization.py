"""
Name sanitization utilities
Turns user-entered project names into safe export filenames
"""
import re


def sanitize_name(name: str) -> str:
    """
    Convert a display name to a filename-safe identifier

    Examples:
        "Wheat Trial 2026" → "wheat_trial_2026"
        "Maize (Loc A/B)" → "maize_loc_a_b"
        "" → "design"

    Args:
        name: Original project name

    Returns:
        Sanitized name containing only letters, digits and underscores
    """
    # Remove special characters, replace spaces with underscores
    sanitized = re.sub(r'[^a-zA-Z0-9_]', '_', str(name))
    # Remove consecutive underscores
    sanitized = re.sub(r'_+', '_', sanitized)
    # Remove leading/trailing underscores
    sanitized = sanitized.strip('_').lower()
    return sanitized or "design"


def export_filename(project_name: str, date_str: str, extension: str) -> str:
    """
    Build the download filename for a field book export

    Examples:
        ("Wheat Trial", "20261017", "csv") → "wheat_trial_IBD_20261017.csv"

    Args:
        project_name: Project display name
        date_str: Date stamp (YYYYMMDD)
        extension: File extension without dot

    Returns:
        Filename
    """
    return f"{sanitize_name(project_name)}_IBD_{date_str}.{extension}"
