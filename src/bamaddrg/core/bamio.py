"""pysam-backed readers and writers for the merge.

``MergedReader`` opens several alignment files as a single stream and yields
``(filename, read)`` pairs, so every record keeps track of the file it came
from.
"""

import heapq
import itertools
import re
import sys

import pysam

from bamaddrg.core.errors import OpenError, ReadError
from bamaddrg.core.header import ReadGroupHeader

_DIGITS = re.compile(r"[0-9]+|[^0-9]")


def _coordinate_key(item):
    read = item[1]
    tid = read.reference_id
    return (tid if tid >= 0 else sys.maxsize, read.reference_start)


def natural_key(name):
    """Sort key matching htslib's natural read-name order.

    Digit runs compare by value, leading zeros ignored; any other character
    compares by code point, also against the first digit of a number.
    """
    return [
        (ord("0"), int(tok)) if "0" <= tok[0] <= "9" else (ord(tok),)
        for tok in _DIGITS.findall(name)
    ]


def _natural_queryname_key(item):
    return natural_key(item[1].query_name)


def _lexicographical_queryname_key(item):
    return item[1].query_name


class MergedReader:
    """Several alignment files read as one order-preserving stream.

    If every input is coordinate-sorted the streams are merged on
    (reference, start); if every input is queryname-sorted they are merged
    on read name, in natural order unless every header says
    ``SS:queryname:lexicographical``.  Otherwise the files are read back to
    back in the order given.
    """

    def __init__(self, filenames, threads=1):
        self.filenames = list(filenames)
        self._files = []
        self._region = None
        for fn in self.filenames:
            mode = "rb" if fn.endswith(".bam") else "r"
            try:
                aln = pysam.AlignmentFile(fn, mode, check_sq=False,
                                          threads=max(1, threads))
            except (OSError, ValueError) as e:
                self.close()
                raise OpenError(f"could not open input file {fn}: {e}") from e
            self._files.append(aln)
        self._check_references()

    def _check_references(self):
        first = self.references
        for fn, aln in zip(self.filenames[1:], self._files[1:]):
            if tuple(zip(aln.references, aln.lengths)) != first:
                self.close()
                raise OpenError(
                    f"reference sequences of {fn} differ from {self.filenames[0]}"
                )

    @property
    def references(self):
        """Ordered ``(name, length)`` pairs shared by all inputs."""
        aln = self._files[0]
        return tuple(zip(aln.references, aln.lengths))

    @property
    def sort_order(self):
        orders = {
            aln.header.to_dict().get("HD", {}).get("SO", "unknown")
            for aln in self._files
        }
        return orders.pop() if len(orders) == 1 else "unknown"

    @property
    def queryname_order(self):
        """``lexicographical`` only if every input says so in ``@HD SS``."""
        orders = {
            aln.header.to_dict().get("HD", {}).get("SS", "queryname:natural")
            for aln in self._files
        }
        if orders == {"queryname:lexicographical"}:
            return "lexicographical"
        return "natural"

    def merged_header(self) -> ReadGroupHeader:
        """Combine the input headers.

        ``@HD`` and ``@SQ`` come from the first file; ``@RG`` and ``@PG``
        entries are collected from every file, first ID wins; ``@CO`` lines
        are de-duplicated.
        """
        merged = self._files[0].header.to_dict()
        for aln in self._files[1:]:
            other = aln.header.to_dict()
            for key in ("RG", "PG"):
                entries = merged.setdefault(key, [])
                seen = {e["ID"] for e in entries}
                for entry in other.get(key, []):
                    if entry["ID"] not in seen:
                        entries.append(entry)
                        seen.add(entry["ID"])
            comments = merged.setdefault("CO", [])
            comments.extend(c for c in other.get("CO", []) if c not in comments)
        return ReadGroupHeader({k: v for k, v in merged.items() if v})

    def locate_indexes(self) -> bool:
        return all(aln.has_index() for aln in self._files)

    def set_region(self, ref_index, start, stop):
        """Restrict iteration to ``[start, stop)`` on one reference."""
        self._region = (self.references[ref_index][0], start, stop)

    def _stream(self, fn, aln):
        if self._region is None:
            reads = aln.fetch(until_eof=True)
        else:
            contig, start, stop = self._region
            reads = aln.fetch(contig, start, stop)
        while True:
            try:
                read = next(reads)
            except StopIteration:
                return
            except (OSError, ValueError) as e:
                raise ReadError(fn, e) from e
            yield fn, read

    def __iter__(self):
        streams = [self._stream(fn, aln)
                   for fn, aln in zip(self.filenames, self._files)]
        order = self.sort_order
        if order == "coordinate":
            return heapq.merge(*streams, key=_coordinate_key)
        if order == "queryname":
            if self.queryname_order == "lexicographical":
                return heapq.merge(*streams, key=_lexicographical_queryname_key)
            return heapq.merge(*streams, key=_natural_queryname_key)
        return itertools.chain.from_iterable(streams)

    def close(self):
        """Close every input; return ``(filename, error)`` for failed closes."""
        failed = []
        for fn, aln in zip(self.filenames, self._files):
            try:
                aln.close()
            except OSError as e:
                failed.append((fn, e))
        self._files = []
        return failed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        failed = self.close()
        if failed and exc_type is None:
            raise ReadError(*failed[0])
        for fn, e in failed:
            print(f"[warn] error closing {fn}: {e}", file=sys.stderr)
        return False


def open_sources(filenames, threads=1) -> MergedReader:
    return MergedReader(filenames, threads=threads)


def open_writer(destination, header: ReadGroupHeader, compressed=True, threads=1):
    """Open a BAM writer; ``"-"`` writes to stdout.

    Uncompressed output is still BAM, written with level-0 BGZF blocks.
    """
    mode = "wb" if compressed else "wbu"
    try:
        return pysam.AlignmentFile(
            destination, mode, header=header.to_dict(), threads=max(1, threads)
        )
    except (OSError, ValueError) as e:
        raise OpenError(f"could not open BAM output stream {destination}: {e}") from e
