"""Look up a single value in INI-formatted text."""

import string

_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_BLANK = " \t"
_EOL = "\r\n"
_SKIPPABLE = _BLANK + _EOL


def _fold(text):
    return text.translate(_LOWER)


def ini_get(data, section, key, default=None):
    """Return the value of ``key`` in ``section`` of INI text ``data``.

    ``section`` of ``None`` selects keys placed before the first section
    header. Section and key names match case-insensitively (ASCII only).
    A value wrapped in double quotes has them stripped. When the key is
    missing or has an empty value, ``default`` (or ``""``) is returned.
    Bytes are read as Latin-1, one character per byte.
    """
    result = default or ""
    if key is None or not data:
        return result
    if isinstance(data, (bytes, bytearray)):
        text = bytes(data).decode("latin-1")
    else:
        text = data
    wanted = section
    size = len(text)
    i = 0
    while i < size:
        if i:
            while i < size and text[i] not in _EOL:
                i += 1
        while i < size and text[i] in _SKIPPABLE:
            i += 1
        if i >= size:
            break
        if text[i] == ";":
            i += 1
            continue
        if text[i] == "[":
            if wanted is None:
                break
            i += 1
            while i < size and text[i] in _BLANK:
                i += 1
            if i >= size:
                break
            start = last = i
            while i < size and text[i] not in _EOL:
                if text[i] not in _BLANK:
                    if text[i] == "]":
                        break
                    last = i
                i += 1
            if start == last and not wanted:
                wanted = None
            elif _fold(text[start:last + 1]) == _fold(wanted):
                wanted = None
            continue
        if wanted is not None:
            i += 1
            continue
        start = last = i
        separated = False
        while i < size and text[i] not in _EOL:
            char = text[i]
            if char not in _BLANK:
                if char == "=":
                    i += 1
                    separated = True
                    break
                last = i
            i += 1
        if not separated:
            continue
        if _fold(text[start:last + 1]) != _fold(key):
            continue
        while i < size and text[i] in _BLANK:
            i += 1
        if i >= size:
            break
        start = last = i
        has_value = False
        while i < size and text[i] not in _EOL:
            if text[i] not in _BLANK:
                last = i
                has_value = True
            i += 1
        if not has_value:
            break
        if text[start] == '"':
            start += 1
            if text[last] == '"':
                last -= 1
        return text[start:last + 1]
    return result