# sysmisc

A handful of small, self-contained file utilities.

## Installation

    pip install sysmisc

## Commands

### fixdelta

Strips directory paths from the source and output file names stored in the
AppHeader of an xdelta3 patch, so the patch can later be applied with just
`xdelta3 -d patch.delta`, without naming the source and output files.

    fixdelta <input.delta> [output.delta]

If the output name is left out, the output file takes the source file name
from the AppHeader with its extension replaced by `.delta`. On success the
two stripped names are printed and the command exits with status 0. On
failure it prints `ERROR-<code>: <message>` and exits with that code:

| code | meaning                                  |
|------|------------------------------------------|
| 1    | can't open input file                    |
| 2    | not a xdelta3 file                       |
| 3    | unrecognized header indicator bits set   |
| 4    | no AppHeader in file                     |
| 6    | invalid filename(s) in AppHeader         |
| 7    | can't create output file                 |
| 8    | output file write error                  |

Called with no arguments or more than two, it prints usage and exits with 1.

### kiesdec

Decrypts Samsung Kies `.SSC` / `.SPB` backup files (AES-256-CBC, blocks of
272 bytes). The output file is created in the current directory.

    kiesdec <filename.ext> [0|1]

Without the last argument the first two header blocks are dropped and the
decrypted payload is written, without padding, as `<filename>.xml.gz`, which
can be unpacked with gzip. With `0` every decrypted block is saved whole into
`<filename>.bin`; with any other value the same, but without the 16 bytes of
padding of each block. Errors are printed; the command always exits with 0.

## Library use

```python
from sysmisc.inifile import ini_get
from sysmisc.fixdelta import fix_delta, FixDeltaError
from sysmisc.kiesdec import decrypt_file, KiesDecryptError

data = b"[main]\nname = \"hello world\"\n"
print(ini_get(data, "main", "name"))   # hello world

try:
    patched, original, written_to = fix_delta("patch.delta")
except FixDeltaError as err:
    print(err.code, err.message)
```

- `sysmisc.inifile.ini_get(data, section, key, default=None)` looks a key up
  in INI text or bytes (bytes are read as Latin-1). Section and key names
  match case-insensitively, `;` starts a comment line, any line endings are
  accepted, a surrounding pair of double quotes is stripped from the value,
  and a `section` of `None` selects keys placed before the first section
  header. A missing key or empty value gives `default`, or `""`.
- `sysmisc.fixdelta` offers `read_var_size` and `write_var_size` (base-128
  integers on a binary stream), `change_file_ext`, `parse_app_header`
  (returns the patched and original base names) and `fix_delta`, which
  returns `(patched, original, output_path)` and raises `FixDeltaError`
  carrying `code`, `message` and, when known, `names`.
- `sysmisc.kiesdec` offers `decrypt_block` (decrypts one block and checks its
  padding), `output_name` and `decrypt_file(input_path, mode=None)`, which
  returns the output file name. Failures raise `KiesDecryptError`; its
  `block` attribute names the block that could not be decrypted.
- `sysmisc.certpatch` offers `fast_find(haystack, needle)`, returning the
  offset of the first match or -1, and `apply_fix(image)`, which looks
  through the executable sections of a 32-bit PE image laid out by virtual
  address, replaces the certificate-check code that treats "root not
  trusted" and "issuer not found" as errors so that both count as valid,
  and returns the patched offset, or `None` when nothing was changed.

## What this package does not do

`sysmisc.certpatch` only changes a mutable buffer that the caller supplies.
It does not attach to or modify a running program, and it is not loaded as a
plug-in by any mail client; there is no command for it.

## Running the tests

    pip install sysmisc[test]
    pytest