"""JSON snapshots of locations and fetched documents."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, List, Union

from chipotle_worker.core.errors import DecodeError, StorageError
from chipotle_worker.models import Location

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def write_json(document: Any, path: PathLike) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fh:
        json.dump(document, fh, ensure_ascii=False, indent=2)
    logger.info("Saved JSON document to %s", target)
    return target


def save_locations(locations: Iterable[Location], path: PathLike) -> Path:
    return write_json([asdict(location) for location in locations], path)


def load_locations(path: PathLike) -> List[Location]:
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as fh:
            raw = fh.read()
    except OSError as exc:
        raise StorageError(f"unable to read {source}: {exc}") from exc

    try:
        entries = json.loads(raw)
    except ValueError as exc:
        raise DecodeError(f"unable to parse {source}: {exc}") from exc
    if not isinstance(entries, list):
        raise DecodeError(f"{source} does not contain a list of locations")

    locations: List[Location] = []
    for entry in entries:
        try:
            locations.append(Location(id=int(entry["id"]), zip_code=str(entry["zip_code"])))
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"{source} contains a malformed location: {entry!r}") from exc
    return locations
