"""Resolve ``-b/-s/-r`` option groups into (filename, sample, read group)."""

import sys
from dataclasses import dataclass

from bamaddrg.core.errors import ConfigurationError

BAM = "bam"
SAMPLE = "sample"
READ_GROUP = "read-group"


@dataclass(frozen=True)
class SourceSpec:
    filename: str
    sample: str
    read_group: str


@dataclass
class _PendingSource:
    """The option group currently being assembled."""

    filename: str = ""
    sample: str = ""
    read_group: str = ""

    def seal(self) -> SourceSpec:
        sample = self.sample or self.filename
        return SourceSpec(
            filename=self.filename,
            sample=sample,
            read_group=self.read_group or sample,
        )


def resolve_sources(tokens):
    """Turn ordered ``(kind, value)`` option tokens into a list of SourceSpec.

    A new ``bam`` token seals the group in progress.  ``sample`` and
    ``read-group`` tokens apply to the group in progress whether they come
    before or after its ``bam`` token.  Defaults are filled per group:
    sample falls back to the filename, read group falls back to the sample.

    Raises
    ------
    ConfigurationError
        If no ``bam`` token was given or a filename is empty.
    """
    specs = []
    pending = _PendingSource()
    for kind, value in tokens:
        if kind == BAM:
            if not value:
                raise ConfigurationError("empty input filename")
            if pending.filename:
                specs.append(pending.seal())
                pending = _PendingSource()
            pending.filename = value
        elif kind == SAMPLE:
            pending.sample = value
        elif kind == READ_GROUP:
            pending.read_group = value
        else:
            raise ValueError(f"unknown source option: {kind!r}")

    if pending.filename:
        specs.append(pending.seal())

    if not specs:
        raise ConfigurationError("no input files specified")
    return specs


def filename_to_read_group(specs):
    """Map each input filename to its read group id.

    Duplicate filenames keep the last assignment; a warning is printed.
    """
    lookup = {}
    for spec in specs:
        if spec.filename in lookup and lookup[spec.filename] != spec.read_group:
            print(
                f"[warn] {spec.filename} listed more than once; "
                f"read group {lookup[spec.filename]} replaced by {spec.read_group}.",
                file=sys.stderr,
            )
        lookup[spec.filename] = spec.read_group
    return lookup


def log_sources(specs):
    for spec in specs:
        print(
            f"[info] {spec.filename} {spec.sample} {spec.read_group}",
            file=sys.stderr,
        )
