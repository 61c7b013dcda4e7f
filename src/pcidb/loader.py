import logging
import pathlib
from typing import Iterable, Optional

from pydantic import ValidationError

from pcidb.config import LoaderConfig
from pcidb.exceptions import (
    ConfigError,
    NoSourceFoundError,
    ParseError,
    SourceReadError,
)
from pcidb.models import PciDatabase
from pcidb.parser import parse_lines

log = logging.getLogger(__name__)


def _is_readable(path: pathlib.Path) -> bool:
    try:
        with open(path, "rb"):
            return True
    except OSError as exc:
        log.debug("skipping pci.ids candidate %s: %s", path, exc)
        return False


def find_source(candidate_paths: Iterable) -> pathlib.Path:
    """Return the first candidate that exists and can be opened for reading."""
    candidates = [pathlib.Path(p) for p in candidate_paths]
    for path in candidates:
        if not path.is_file():
            log.debug("skipping pci.ids candidate %s: not a file", path)
            continue
        if _is_readable(path):
            return path
    raise NoSourceFoundError(candidates)


def load_file(path, encoding: str = "utf-8") -> PciDatabase:
    """Parse a single pci.ids file.

    Undecodable bytes are replaced instead of aborting the load. Errors
    raised here name the file they came from.
    """
    try:
        f = open(path, "r", encoding=encoding, errors="replace")
    except (OSError, LookupError) as exc:
        raise SourceReadError(path, str(exc)) from exc

    with f:
        try:
            return parse_lines(f)
        except ParseError as exc:
            raise exc.with_path(path) from exc
        except OSError as exc:
            raise SourceReadError(path, str(exc)) from exc


def load(
    candidate_paths: Optional[Iterable] = None,
    config: Optional[LoaderConfig] = None,
) -> PciDatabase:
    """Load the database from the first readable candidate path.

    Explicit candidate_paths take precedence over the ones in config. With
    neither, the platform defaults and PCIDB_* environment overrides apply.
    """
    if config is None:
        try:
            config = LoaderConfig.from_environment()
        except ValidationError as exc:
            raise ConfigError(f"invalid pcidb configuration: {exc}") from exc
    if candidate_paths is None:
        candidate_paths = config.candidate_paths

    path = find_source(candidate_paths)
    log.info("loading pci.ids from %s", path)
    db = load_file(path, encoding=config.encoding)
    log.info("loaded %s", db.summary())
    return db
