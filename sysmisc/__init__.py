"""Small file utilities: xdelta3 AppHeader fixing, INI lookup, Kies decryption and PE patching."""

__version__ = "1.0.0"
__all__ = ["certpatch", "fixdelta", "inifile", "kiesdec"]