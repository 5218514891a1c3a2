"""Strip directory paths from the file names stored in an xdelta3 AppHeader."""

import os
import sys

XDELTA3_MAGIC = b"\xd6\xc3\xc4\x00"
VCD_SECONDARY = 1 << 0
VCD_CODETABLE = 1 << 1
VCD_APPHEADER = 1 << 2
VCD_HDR_MAX = VCD_SECONDARY | VCD_CODETABLE | VCD_APPHEADER

_MESSAGES = (
    "unknown error",
    "can't open input file",
    "not a xdelta3 file",
    "unrecognized header indicator bits set",
    "no AppHeader in file",
    "memory allocation failed for AppHeader",
    "invalid filename(s) in AppHeader",
    "can't create output file",
    "output file write error",
)

_SLASH = ord("/")
_BACKSLASH = ord("\\")

_BANNER = "xdelta3 AppHeader fixer v1.0\n"
_USAGE = (
    "This program strips path from the filenames of source and output files\n"
    "inside AppHeader of xdelta3 patches, so you can call \"xdelta3 -d patch.delta\"\n"
    "without specify source and output filenames.\n\n"
    "Usage: fixdelta <input.delta> [output.delta]\n\n"
    "If optional output filename is omitted then an output file will have xdelta3\n"
    "source filename (from AppHeader) with \".delta\" as extension.\n"
)


class FixDeltaError(Exception):
    """Failure while fixing a delta file; ``code`` is the numeric error code."""

    def __init__(self, code, names=None):
        self.code = code
        self.message = _MESSAGES[code] if 0 <= code < len(_MESSAGES) else _MESSAGES[0]
        self.names = names
        super().__init__(self.message)


def read_var_size(stream):
    """Read a big-endian base-128 integer; end of data acts as a final zero byte."""
    value = 0
    while True:
        chunk = stream.read(1)
        byte = chunk[0] if chunk else 0
        value = ((value << 7) | (byte & 0x7F)) & 0xFFFFFFFF
        if not byte & 0x80:
            return value


def _encode_var_size(value):
    value &= 0xFFFFFFFF
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def write_var_size(stream, value):
    """Write ``value`` as a base-128 integer and return the number of bytes written."""
    encoded = _encode_var_size(value)
    stream.write(encoded)
    return len(encoded)


def change_file_ext(name, ext):
    """Replace everything from the last dot in ``name`` with ``ext``, or append it."""
    dot = name.rfind(".")
    return name + ext if dot < 0 else name[:dot] + ext


def _to_text(raw):
    return raw.decode("utf-8", "surrogateescape")


def _to_bytes(text):
    return text.encode("utf-8", "surrogateescape")


def parse_app_header(data):
    """Return the (patched, original) base names from an AppHeader block."""
    text = bytes(data).split(b"\0", 1)[0]
    size = len(text)
    cuts = []
    patched = 0
    original = None
    for index, char in enumerate(text):
        following = text[index + 1] if index + 1 < size else 0
        if original is None and char == _SLASH and following == _SLASH:
            cuts.append(index)
            original = index + 2
        elif char in (_SLASH, _BACKSLASH):
            cuts.append(index)
            if following:
                if original is None:
                    patched = index + 1
                else:
                    original = index + 1

    def segment(start):
        end = min((cut for cut in cuts if cut >= start), default=size)
        return text[start:end]

    if original is None:
        raise FixDeltaError(6)
    patched_name = segment(patched)
    original_name = segment(original)
    if not patched_name or not original_name:
        raise FixDeltaError(6)
    return _to_text(patched_name), _to_text(original_name)


def fix_delta(input_path, output_path=None):
    """Rewrite the AppHeader of ``input_path`` without directory paths.

    The result goes to ``output_path`` or, when it is ``None``, to the
    original file name with a ``.delta`` extension. Returns the patched
    name, the original name and the output path.
    """
    try:
        source = open(input_path, "rb")
    except OSError as exc:
        raise FixDeltaError(1) from exc
    with source:
        total = source.seek(0, os.SEEK_END)
        source.seek(0)
        if source.read(4).ljust(4, b"\0") != XDELTA3_MAGIC:
            raise FixDeltaError(2)
        flag_byte = source.read(1)
        flags = flag_byte[0] if flag_byte else 0
        if flags > VCD_HDR_MAX:
            raise FixDeltaError(3)
        head_size = 5
        for bit in (VCD_SECONDARY, VCD_CODETABLE):
            if flags & bit:
                skip = read_var_size(source)
                source.seek(skip, os.SEEK_CUR)
                head_size += skip
        if not flags & VCD_APPHEADER:
            raise FixDeltaError(4)
        length = read_var_size(source)
        header = source.read(length)
        body_start = source.tell()
        patched, original = parse_app_header(header)
        names = (patched, original)
        target = output_path if output_path is not None else change_file_ext(original, ".delta")
        new_header = _to_bytes(patched) + b"//" + _to_bytes(original) + b"/"
        try:
            out = open(target, "wb")
        except OSError as exc:
            raise FixDeltaError(7, names) from exc
        with out:
            try:
                source.seek(0)
                out.write(source.read(head_size))
                block_len = len(new_header)
                block_len += write_var_size(out, block_len)
                out.write(new_header)
                source.seek(body_start)
                out.write(source.read())
                out.flush()
                written = out.tell()
            except OSError as exc:
                raise FixDeltaError(8, names) from exc
        if written != head_size + block_len + total - body_start:
            raise FixDeltaError(8, names)
    return patched, original, os.fspath(target)


def main(argv=None):
    """Command-line entry point; returns the process exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    print(_BANNER)
    if not 1 <= len(args) <= 2:
        print(_USAGE)
        return 1
    print(f"{args[0]}\n")
    try:
        patched, original, _ = fix_delta(args[0], args[1] if len(args) == 2 else None)
    except FixDeltaError as err:
        if err.names:
            print(*err.names, sep="\n")
        print(f"ERROR-{err.code}: {err.message}", end="")
        code = err.code
    else:
        print(patched)
        print(original)
        print("\ndone", end="")
        code = 0
    print("\n\n", end="")
    return code


if __name__ == "__main__":
    sys.exit(main())