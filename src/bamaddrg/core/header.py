"""Merged-header read-group bookkeeping.

The header is kept as the plain dict pysam produces with
``AlignmentHeader.to_dict()``; ``ReadGroupHeader`` only exposes the
read-group operations the merge needs.
"""

import sys
from dataclasses import dataclass

import pysam


@dataclass(frozen=True)
class ReadGroupEntry:
    id: str
    sample: str

    @classmethod
    def from_source(cls, spec):
        return cls(id=spec.read_group, sample=spec.sample)


class ReadGroupHeader:
    """Narrow read-group view over a SAM header dict."""

    def __init__(self, header_dict):
        self._header = {k: list(v) if isinstance(v, list) else v
                        for k, v in header_dict.items()}
        self._header["RG"] = [dict(rg) for rg in self._header.get("RG", [])]

    def __iter__(self):
        for rg in self._header["RG"]:
            yield ReadGroupEntry(id=rg["ID"], sample=rg.get("SM", ""))

    def __len__(self):
        return len(self._header["RG"])

    def ids(self):
        return [rg["ID"] for rg in self._header["RG"]]

    def samples(self):
        return {rg.get("SM", "") for rg in self._header["RG"]}

    def add(self, entry: ReadGroupEntry):
        """Add a read group; an existing entry with the same id is replaced."""
        new = {"ID": entry.id, "SM": entry.sample}
        for i, rg in enumerate(self._header["RG"]):
            if rg["ID"] == entry.id:
                if rg.get("SM") != entry.sample:
                    print(
                        f"[warn] read group {entry.id} already in header "
                        f"(SM:{rg.get('SM', '')}); replacing with SM:{entry.sample}.",
                        file=sys.stderr,
                    )
                self._header["RG"][i] = new
                return
        self._header["RG"].append(new)

    def remove(self, rg_id: str):
        self._header["RG"] = [
            rg for rg in self._header["RG"] if rg["ID"] != rg_id
        ]

    def to_dict(self):
        header = dict(self._header)
        if not header["RG"]:
            del header["RG"]
        return header

    def to_text(self) -> str:
        return str(pysam.AlignmentHeader.from_dict(self.to_dict()))


def merge_read_groups(header: ReadGroupHeader, specs, deleted_samples=()):
    """Add one read group per source, then drop groups of deleted samples.

    Removal runs after every addition, so a sample that is both added and
    deleted ends up absent from the header.
    """
    for spec in specs:
        header.add(ReadGroupEntry.from_source(spec))

    deleted = set(deleted_samples)
    doomed = [entry for entry in header if entry.sample in deleted]
    for entry in doomed:
        header.remove(entry.id)
        print(
            f"[info] removed read group {entry.id} (sample {entry.sample}).",
            file=sys.stderr,
        )
    return header
