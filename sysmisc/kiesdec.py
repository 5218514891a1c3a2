"""Decrypt Samsung Kies .SSC / .SPB backup files."""

import os
import sys

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

# Fixed by the Kies file format: every block is AES-256-CBC with these values.
CIPHER_KEY = b"epovviwlx,dirwq;sor0-fvksz,erwog"
CIPHER_IV = b"afie,crywlxoetka"

BLOCK_SIZE = 0x110
PAD_SIZE = 0x10
HEADER_BLOCKS = 2

_AES_BLOCK = 16

_BANNER = "Samsung Kies .SSC / .SPB decrypter v1.0\n"
_USAGE = (
    "Usage: {prog} <filename.ext> [0|1]\n"
    "The last parameter optional and must be one of the following values:\n"
    "0 - save decrypted block as is in .BIN format\n"
    "1 - same as above, but without padding blocks\n"
    "Output *.XML.GZ files can be unpacked with gzip or any compatible software.\n"
)


class KiesDecryptError(Exception):
    """Failure while decrypting; ``block`` is the index of a block that failed."""

    def __init__(self, message, block=None):
        super().__init__(message)
        self.block = block


def decrypt_block(block):
    """Decrypt one block and return all of its bytes, padding included.

    The trailing PKCS#7 padding is checked and raises
    :class:`KiesDecryptError` when it is malformed.
    """
    data = bytes(block)
    if not data or len(data) % _AES_BLOCK:
        raise KiesDecryptError("block length is not a multiple of the cipher block size")
    decryptor = Cipher(algorithms.AES(CIPHER_KEY), modes.CBC(CIPHER_IV)).decryptor()
    plain = decryptor.update(data) + decryptor.finalize()
    pad = plain[-1]
    if not 1 <= pad <= _AES_BLOCK or plain[-pad:] != bytes([pad]) * pad:
        raise KiesDecryptError("bad padding in decrypted block")
    return plain


def _base_name(path):
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


def output_name(input_path, raw):
    """Name of the output file: the input's base name with a new extension.

    ``raw`` selects ``.bin``; otherwise ``.xml.gz`` is used.
    """
    name = _base_name(os.fspath(input_path))
    dot = name.rfind(".")
    if dot >= 0:
        name = name[:dot]
    return name + (".bin" if raw else ".xml.gz")


def _decrypt(input_path, mode, announce):
    try:
        source = open(input_path, "rb")
    except OSError as exc:
        raise KiesDecryptError("can't open input file") from exc
    with source:
        size = source.seek(0, os.SEEK_END)
        source.seek(0)
        if size % BLOCK_SIZE or size <= BLOCK_SIZE * HEADER_BLOCKS:
            raise KiesDecryptError("invalid file format")
        target = output_name(input_path, mode is not None)
        if announce is not None:
            announce(target)
        try:
            out = open(target, "wb")
        except OSError as exc:
            raise KiesDecryptError("can't create output file") from exc
        keep = BLOCK_SIZE if mode is not None and mode[:1] == "0" else BLOCK_SIZE - PAD_SIZE
        with out:
            for index in range(size // BLOCK_SIZE):
                try:
                    plain = decrypt_block(source.read(BLOCK_SIZE))
                except KiesDecryptError as exc:
                    raise KiesDecryptError(
                        f"can't decrypt block #{index}", block=index
                    ) from exc
                if mode is not None or index >= HEADER_BLOCKS:
                    out.write(plain[:keep])
    return target


def decrypt_file(input_path, mode=None):
    """Decrypt ``input_path`` into the current directory and return the output name.

    With ``mode`` of ``None`` the two header blocks are dropped and the
    gzip payload is written without padding to ``<name>.xml.gz``. Otherwise
    every block goes to ``<name>.bin``: whole when ``mode`` starts with
    ``"0"``, without padding for any other value.
    """
    return _decrypt(input_path, mode, None)


def main(argv=None):
    """Command-line entry point; always returns 0."""
    args = sys.argv[1:] if argv is None else list(argv)
    print(_BANNER)
    if not 1 <= len(args) <= 2:
        prog = _base_name(sys.argv[0]) if sys.argv and sys.argv[0] else "kiesdec"
        print(_USAGE.format(prog=prog))
        return 0
    print(f"Input: {args[0]}")
    mode = args[1] if len(args) == 2 else None
    try:
        _decrypt(args[0], mode, lambda target: print(f"Output: {target}"))
    except KiesDecryptError as err:
        print(f"\nERROR: {err}.")
        if err.block:
            print("\ndone")
    else:
        print("\ndone")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())