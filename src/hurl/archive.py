"""Tarball extraction for :func:`hurl.downloadtarball`.

Archives come straight off the network, so every member is checked before
anything is written: absolute paths, ``..`` components, links and device
files are refused. Any compression ``tarfile`` understands (gzip, bzip2,
xz, none) is accepted.
"""

from __future__ import annotations

import os
import shutil
import tarfile
from pathlib import Path, PurePosixPath
from typing import Union

from hurl.exceptions import ArchiveError
from hurl.output import debug


def _member_path(name: str) -> PurePosixPath:
    path = PurePosixPath(name)
    if path.is_absolute() or ".." in path.parts:
        raise ArchiveError(f"Unsafe path in archive: {name}")
    return path


def extract_tarball(
    archive_path: Union[str, os.PathLike], destination: Union[str, os.PathLike]
) -> list[Path]:
    """Extract every member of a tar archive under *destination*.

    Args:
        archive_path: The downloaded tarball.
        destination: Directory to extract into; created if missing.

    Returns:
        Paths of the regular files written.

    Raises:
        ArchiveError: The archive is unreadable, contains an unsafe member,
            or a file could not be written. The archive is left in place.
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    extracted: list[Path] = []
    try:
        with tarfile.open(archive_path, mode="r:*") as archive:
            members = archive.getmembers()
            for member in members:
                _member_path(member.name)
                if member.islnk() or member.issym():
                    raise ArchiveError(f"Unsafe link in archive: {member.name}")
                if not (member.isdir() or member.isfile()):
                    raise ArchiveError(f"Unsupported member type in archive: {member.name}")

            destination.mkdir(parents=True, exist_ok=True)
            for member in members:
                target = destination.joinpath(*_member_path(member.name).parts)
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                source = archive.extractfile(member)
                if source is None:
                    raise ArchiveError(f"Failed to extract member: {member.name}")
                with source, target.open("wb") as out:
                    shutil.copyfileobj(source, out)
                extracted.append(target)
    except (tarfile.TarError, OSError) as exc:
        raise ArchiveError(f"Failed to extract tar archive {archive_path}: {exc}") from exc

    debug(f"extracted {len(extracted)} file(s) from {archive_path} into {destination}")
    return extracted
