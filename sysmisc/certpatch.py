"""Patch the certificate check of a loaded mail client image so that
untrusted-root and unknown-issuer results are treated as valid."""

import struct

CODE_OLD = bytes((
    0x80, 0x7D, 0xFE, 0x02,  # cmp byte [ebp - 02], 02
    0x74, 0x06,              # je +06
    0x80, 0x7D, 0xFE, 0x03,  # cmp byte [ebp - 02], 03
    0x75,                    # jne ...
))

# Error codes 2 (root not trusted) and 3 (issuer not found) become 1 (OK).
CODE_NEW = bytes((
    0x80, 0x7D, 0xFE, 0x03,  # cmp byte [ebp - 02], 03
    0x77, 0x06,              # ja +06
    0xC6, 0x45, 0xFE, 0x01,  # mov byte [ebp - 02], 01
    0xEB,                    # jmps ...
))

_DOS_MAGIC = b"MZ"
_NT_SIGNATURE = b"PE\0\0"
_OPTIONAL_HDR_MAGIC = 0x10B
_SECTION_HEADER_SIZE = 40
_SCN_MEM_EXECUTE = 0x20000000
_SCN_MEM_READ = 0x40000000
_CODE_FLAGS = _SCN_MEM_EXECUTE | _SCN_MEM_READ


def fast_find(haystack, needle):
    """Return the offset of the first ``needle`` in ``haystack``, or -1."""
    if not haystack or not needle:
        return -1
    return bytes(haystack).find(bytes(needle))


def _code_sections(image):
    if image[:2] != _DOS_MAGIC:
        return
    (lfanew,) = struct.unpack_from("<i", image, 0x3C)
    if lfanew < 0 or bytes(image[lfanew:lfanew + 4]) != _NT_SIGNATURE:
        return
    count, = struct.unpack_from("<H", image, lfanew + 6)
    optional_size, = struct.unpack_from("<H", image, lfanew + 20)
    optional = lfanew + 24
    magic, = struct.unpack_from("<H", image, optional)
    if not optional_size or magic != _OPTIONAL_HDR_MAGIC:
        return
    table = optional + optional_size
    for index in range(count):
        offset = table + index * _SECTION_HEADER_SIZE
        virtual_size, virtual_address = struct.unpack_from("<II", image, offset + 8)
        (characteristics,) = struct.unpack_from("<I", image, offset + 36)
        if characteristics & _CODE_FLAGS == _CODE_FLAGS:
            yield virtual_address, virtual_size


def apply_fix(image):
    """Patch the certificate check in a memory image of a PE executable.

    ``image`` is a mutable buffer laid out by virtual address. The first
    executable section holding the original code is patched in place;
    the patched offset is returned, or ``None`` when nothing was changed.
    """
    try:
        for address, size in _code_sections(image):
            found = fast_find(image[address:address + size], CODE_OLD)
            if found >= 0:
                start = address + found
                image[start:start + len(CODE_NEW)] = CODE_NEW
                return start
    except struct.error:
        return None
    return None