import codecs
import os
import pathlib
import sys
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator
from typing_extensions import Self

PATH_ENV_VAR = "PCIDB_PATH"
ENCODING_ENV_VAR = "PCIDB_ENCODING"

POSIX_PCI_IDS_PATHS = [
    "/usr/share/hwdata/pci.ids",
    "/usr/share/misc/pci.ids",
    "/usr/local/share/pci.ids",
]

# where the windows tooling caches its downloaded copy of pci.ids
WINDOWS_PCI_IDS_DIR = "pcidb"
WINDOWS_PCI_IDS_FILENAME = "pciids.txt"


def default_candidate_paths(
    platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> List[pathlib.PurePath]:
    """Return the usual pci.ids locations for a platform, in search order."""
    if platform is None:
        platform = sys.platform
    if environ is None:
        environ = os.environ

    if platform.startswith("win"):
        local_app_data = environ.get("LOCALAPPDATA")
        if not local_app_data:
            return []
        return [
            pathlib.PureWindowsPath(local_app_data)
            / WINDOWS_PCI_IDS_DIR
            / WINDOWS_PCI_IDS_FILENAME
        ]

    return [pathlib.PurePosixPath(p) for p in POSIX_PCI_IDS_PATHS]


class LoaderConfig(BaseModel):
    candidate_paths: List[pathlib.Path] = Field(
        default_factory=lambda: [pathlib.Path(p) for p in default_candidate_paths()]
    )
    encoding: str = "utf-8"

    @field_validator("encoding", mode="after")
    @classmethod
    def _check_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"unknown encoding {v!r}")
        return v

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Build a config, letting PCIDB_PATH and PCIDB_ENCODING override defaults.

        PCIDB_PATH is a list of paths separated by os.pathsep and replaces the
        platform defaults entirely.
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        env_paths = environ.get(PATH_ENV_VAR)
        if env_paths:
            kwargs["candidate_paths"] = [p for p in env_paths.split(os.pathsep) if p]
        else:
            kwargs["candidate_paths"] = [
                str(p) for p in default_candidate_paths(environ=environ)
            ]

        env_encoding = environ.get(ENCODING_ENV_VAR)
        if env_encoding:
            kwargs["encoding"] = env_encoding

        return cls(**kwargs)
