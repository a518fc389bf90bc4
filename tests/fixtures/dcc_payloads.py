"""DCC SEND payloads seen from real bots, with the fields they carry."""

VALID_PAYLOADS = [
    # payload, filename, address, port, filesize, filesize_known
    (
        'DCC SEND "My File.bin" 3232235777 51413 104857600',
        "My File.bin",
        "192.168.1.1",
        51413,
        104857600,
        True,
    ),
    ("DCC SEND ubuntu.iso 3232235777 5000 1048576", "ubuntu.iso", "192.168.1.1", 5000, 1048576, True),
    ('DCC SEND "foo.txt" 3232235777 5000 1048576', "foo.txt", "192.168.1.1", 5000, 1048576, True),
    (
        'DCC SEND "hello\\"world.txt" 3232235777 5000 1048576',
        'hello"world.txt',
        "192.168.1.1",
        5000,
        1048576,
        True,
    ),
    (
        'DCC SEND "dir\\\\" 3232235777 5000 10',
        "dir\\",
        "192.168.1.1",
        5000,
        10,
        True,
    ),
    (
        'DCC SEND "[Group] Show - 01 [1080p].mkv" 1520244263 40000 1468006400',
        "[Group] Show - 01 [1080p].mkv",
        "90.157.22.39",
        40000,
        1468006400,
        True,
    ),
    ("DCC SEND file.zip 10.0.0.5 6000 42", "file.zip", "10.0.0.5", 6000, 42, True),
    ("DCC SEND file.zip 2001:db8::1 6000 42", "file.zip", "2001:db8::1", 6000, 42, True),
    ("DCC SEND nosize.bin 3232235777 5000", "nosize.bin", "192.168.1.1", 5000, 0, False),
    ("DCC SEND big.img 16777343 65535 18446744073709551615", "big.img", "1.0.0.127", 65535, 18446744073709551615, True),
    ("DCC SEND passive.bin 3232235777 0 1024 77", "passive.bin", "192.168.1.1", 0, 1024, True),
    ("dcc send lower.txt 0 1 2 T", "lower.txt", "0.0.0.0", 1, 2, True),
]

MALFORMED_PAYLOADS = [
    # payload, reason name
    ("DCC SEND", "MISSING_FIELD"),
    ("DCC SEND file.bin", "MISSING_FIELD"),
    ("DCC SEND file.bin 3232235777", "MISSING_FIELD"),
    ("DCC SEND file.bin 3232235777 http 100", "INVALID_PORT"),
    ("DCC SEND file.bin 3232235777 -1 100", "INVALID_PORT"),
    ("DCC SEND file.bin 3232235777 65536 100", "PORT_OUT_OF_RANGE"),
    ("DCC SEND file.bin 3232235777 5000 lots", "INVALID_SIZE"),
    ("DCC SEND file.bin 3232235777 5000 18446744073709551616", "SIZE_OUT_OF_RANGE"),
    ("DCC SEND file.bin 4294967296 5000 100", "ADDRESS_OUT_OF_RANGE"),
    ("DCC SEND file.bin bots.example.net 5000 100", "INVALID_ADDRESS"),
    ('DCC SEND "never closed.bin 3232235777 5000 100', "UNTERMINATED_QUOTE"),
    ('DCC SEND "" 3232235777 5000 100', "MISSING_FIELD"),
    ("DCC ACCEPT file.bin 5000 1024", "NOT_DCC_SEND"),
    ("VERSION", "NOT_DCC_SEND"),
]
