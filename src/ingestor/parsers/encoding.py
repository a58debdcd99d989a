"""
Best-effort text encoding detection.

Detection never fails: when nothing is conclusive the caller gets UTF-8.
"""

import codecs
import logging

import chardet

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
MIN_CONFIDENCE = 0.5

BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def _decodes_as_utf8(sample: bytes) -> bool:
    # A sample cut from a larger file may end inside a multi-byte sequence
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=False)
    except UnicodeDecodeError:
        return False
    return True


def detect_encoding(sample: bytes) -> str:
    """
    Guess the text encoding of a byte sample.

    Order: byte order mark, valid UTF-8, then ``chardet`` when it is
    reasonably confident, otherwise UTF-8.

    Args:
        sample: Leading bytes of the file

    Returns:
        A codec name accepted by ``codecs.lookup``
    """
    for bom, name in BOMS:
        if sample.startswith(bom):
            return name

    if _decodes_as_utf8(sample):
        return DEFAULT_ENCODING

    guess = chardet.detect(sample)
    logger.debug(f"chardet.detect -> {guess}")
    name = guess.get("encoding")
    if name and (guess.get("confidence") or 0.0) >= MIN_CONFIDENCE:
        try:
            return codecs.lookup(name).name
        except LookupError:
            logger.debug(f"chardet suggested unknown codec {name!r}")

    logger.warning(f"Could not determine text encoding, falling back to {DEFAULT_ENCODING}")
    return DEFAULT_ENCODING
