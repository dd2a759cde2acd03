"""
Formatierungsfunktionen für Anzeige.

Konvertiert numerische Werte in lesbare Strings.
"""


def format_file_size(num_bytes: float) -> str:
    """
    Formatiere Dateigröße.

    Args:
        num_bytes: Größe in Bytes

    Returns:
        Formatierter String (z.B. "512.00 B", "1.50 KB", "2.00 MB")
    """
    if num_bytes < 1024:
        return f"{num_bytes:.2f} B"
    elif num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.2f} KB"
    else:
        return f"{num_bytes / (1024 * 1024):.2f} MB"


def format_frequency(hz: float) -> str:
    """
    Formatiere Frequenz in lesbares Format.

    Args:
        hz: Frequenz in Hz

    Returns:
        Formatierter String (z.B. "1.5 kHz" oder "250 Hz")
    """
    if hz >= 1000:
        return f"{hz/1000:.1f} kHz"
    else:
        return f"{hz:.0f} Hz"


def format_db(db: float, precision: int = 1) -> str:
    """
    Formatiere dB-Wert.

    Args:
        db: Pegel in dB
        precision: Nachkommastellen

    Returns:
        Formatierter String (z.B. "-12.3 dB")
    """
    if db == float('-inf'):
        return "-∞ dB"
    if db == float('inf'):
        return "∞ dB"
    return f"{db:.{precision}f} dB"


def format_sample_rate(sr: int) -> str:
    """
    Formatiere Samplerate.

    Args:
        sr: Samplerate in Hz

    Returns:
        Formatierter String (z.B. "44.1 kHz" oder "48 kHz")
    """
    if sr % 1000 == 0:
        return f"{sr // 1000} kHz"
    else:
        return f"{sr / 1000:.1f} kHz"


def format_duration(seconds: float) -> str:
    """
    Formatiere Dauer für Anzeige.

    Returns:
        Formatierter String (z.B. "3:45.20" oder "0:01.50")
    """
    minutes = int(seconds // 60)
    secs = seconds % 60
    return f"{minutes}:{secs:05.2f}"


def format_channels(num_channels: int) -> str:
    """Mono, Stereo oder "X Kanäle"."""
    if num_channels == 1:
        return "Mono"
    elif num_channels == 2:
        return "Stereo"
    else:
        return f"{num_channels} Kanäle"
