import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from sysmisc.kiesdec import (
    BLOCK_SIZE,
    CIPHER_IV,
    CIPHER_KEY,
    PAD_SIZE,
    KiesDecryptError,
    decrypt_block,
    decrypt_file,
    main,
    output_name,
)


def _encrypt(data):
    encryptor = Cipher(algorithms.AES(CIPHER_KEY), modes.CBC(CIPHER_IV)).encryptor()
    return encryptor.update(data) + encryptor.finalize()


def _block(fill):
    plain = bytes([fill]) * (BLOCK_SIZE - PAD_SIZE)
    return plain, _encrypt(plain + bytes([PAD_SIZE]) * PAD_SIZE)


def _write_file(path, fills):
    plains = []
    with open(path, "wb") as handle:
        for fill in fills:
            plain, cipher = _block(fill)
            plains.append(plain)
            handle.write(cipher)
    return plains


def test_decrypt_block_round_trip():
    plain, cipher = _block(0x41)
    result = decrypt_block(cipher)
    assert result == plain + bytes([PAD_SIZE]) * PAD_SIZE
    assert len(result) == BLOCK_SIZE


def test_decrypt_block_rejects_bad_padding():
    cipher = _encrypt(b"\x00" * BLOCK_SIZE)
    with pytest.raises(KiesDecryptError):
        decrypt_block(cipher)


def test_decrypt_block_rejects_bad_length():
    with pytest.raises(KiesDecryptError):
        decrypt_block(b"\x00" * 17)


@pytest.mark.parametrize(
    "path, raw, expected",
    [
        ("dir/phone.ssc", False, "phone.xml.gz"),
        ("C:\\backup\\a.b.spb", True, "a.b.bin"),
        ("noext", True, "noext.bin"),
    ],
)
def test_output_name(path, raw, expected):
    assert output_name(path, raw) == expected


def test_decrypt_file_default_skips_header(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    plains = _write_file(tmp_path / "contacts.spb", [1, 2, 3, 4])
    target = decrypt_file(tmp_path / "contacts.spb")
    assert target == "contacts.xml.gz"
    assert (tmp_path / target).read_bytes() == plains[2] + plains[3]


def test_decrypt_file_raw_keeps_padding(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    plains = _write_file(tmp_path / "memo.ssc", [7, 8, 9])
    target = decrypt_file(tmp_path / "memo.ssc", "0")
    pad = bytes([PAD_SIZE]) * PAD_SIZE
    assert target == "memo.bin"
    assert (tmp_path / target).read_bytes() == b"".join(p + pad for p in plains)


@pytest.mark.parametrize("mode", ["1", ""])
def test_decrypt_file_bin_without_padding(tmp_path, monkeypatch, mode):
    monkeypatch.chdir(tmp_path)
    plains = _write_file(tmp_path / "memo.ssc", [7, 8, 9])
    target = decrypt_file(tmp_path / "memo.ssc", mode)
    assert (tmp_path / target).read_bytes() == b"".join(plains)


def test_decrypt_file_too_small(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_file(tmp_path / "small.ssc", [1, 2])
    with pytest.raises(KiesDecryptError, match="invalid file format"):
        decrypt_file(tmp_path / "small.ssc")


def test_decrypt_file_not_block_multiple(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "odd.ssc").write_bytes(b"\x00" * (BLOCK_SIZE * 3 + 1))
    with pytest.raises(KiesDecryptError, match="invalid file format"):
        decrypt_file(tmp_path / "odd.ssc")


def test_decrypt_file_missing(tmp_path):
    with pytest.raises(KiesDecryptError, match="can't open input file"):
        decrypt_file(tmp_path / "absent.ssc")


def test_decrypt_file_reports_failed_block(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_file(tmp_path / "broken.ssc", [1, 2])
    with open(tmp_path / "broken.ssc", "ab") as handle:
        handle.write(_encrypt(b"\x00" * BLOCK_SIZE))
    with pytest.raises(KiesDecryptError) as info:
        decrypt_file(tmp_path / "broken.ssc")
    assert info.value.block == 2


def test_main_usage(capsys):
    assert main([]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_main_decrypts(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    plains = _write_file(tmp_path / "data.spb", [5, 6, 7])
    assert main([str(tmp_path / "data.spb")]) == 0
    out = capsys.readouterr().out
    assert "Output: data.xml.gz" in out
    assert "done" in out
    assert (tmp_path / "data.xml.gz").read_bytes() == plains[2]