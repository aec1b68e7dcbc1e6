"""
Parsers for the platform's delimiter-separated response format.

A record is a flat list of alternating keys and values, e.g.
``1:128:2:Stereo Madness:35:1``, parsed into a sparse ``{int: str}`` mapping.
"""

import logging

from gd_audio_cache.exceptions import MalformedRecordError
from gd_audio_cache.models.audio import Record

log = logging.getLogger(__name__)

NO_DATA = "-1"


def parse_record(text: str, delimiter: str) -> Record:
    """
    Parses one record into a sparse mapping of field index to value.

    The server's ``-1`` "no data" answer yields an empty record. An odd number
    of pieces is tolerated: the trailing key has no value and is dropped.
    """
    if text == NO_DATA:
        log.warning("Parsing a record the server answered with -1 (no data).")
        return {}

    pieces = text.split(delimiter)
    if len(pieces) % 2 != 0:
        log.warning(
            MalformedRecordError(
                f"Record has {len(pieces)} pieces, which isn't divisible by two; "
                f"dropping trailing key {pieces[-1]!r}."
            )
        )

    record: Record = {}
    for i in range(0, len(pieces) - 1, 2):
        key, value = pieces[i], pieces[i + 1]
        try:
            record[int(key)] = value
        except ValueError:
            log.debug(f"Skipping non-numeric record key {key!r}.")
    return record


def parse_record_list(
    text: str, record_separator: str = "|", delimiter: str = ":"
) -> list[Record]:
    """
    Parses the first ``#`` section of a response into a list of records.
    Empty responses yield an empty list.
    """
    section = text.split("#")[0]
    if not section or section == NO_DATA:
        return []
    return [
        parse_record(chunk, delimiter) for chunk in section.split(record_separator)
    ]


def split_ids(value: str | None) -> list[int]:
    """Splits a comma-separated id list, dropping empty, negative or non-numeric entries."""
    if not value:
        return []
    ids = []
    for piece in value.split(","):
        piece = piece.strip()
        try:
            asset_id = int(piece)
        except ValueError:
            if piece:
                log.debug(f"Ignoring non-numeric id {piece!r}.")
            continue
        if asset_id < 0:
            log.debug(f"Ignoring negative id {asset_id}.")
            continue
        ids.append(asset_id)
    return ids
