"""Merge BAM files and write every alignment with the RG tag of its source."""

import sys
from collections import Counter

from bamaddrg.core.bamio import open_sources, open_writer
from bamaddrg.core.errors import ConfigurationError, TagError, WriteError
from bamaddrg.core.header import merge_read_groups
from bamaddrg.core.region import parse_region, resolve_region
from bamaddrg.core.sources import filename_to_read_group, log_sources


def rewrite_read_groups(reader, writer, read_groups):
    """Stream ``(filename, read)`` pairs from reader to writer, setting RG.

    Stops at the first read whose tag cannot be set or that the writer
    rejects; nothing after it is written.

    Parameters
    ----------
    reader : iterable of (str, pysam.AlignedSegment)
        Merged input stream.
    writer : object with a ``write(read)`` method
        Output stream, already opened with the final header.
    read_groups : dict
        Filename to read group id.

    Returns
    -------
    collections.Counter
        Records written per filename.
    """
    counts = Counter()
    for fn, read in reader:
        try:
            rg = read_groups[fn]
        except KeyError:
            raise TagError(read.query_name, f"no read group for {fn}") from None
        try:
            read.set_tag("RG", rg, value_type="Z")
        except (ValueError, TypeError, KeyError) as e:
            raise TagError(read.query_name, e) from e
        try:
            writer.write(read)
        except (OSError, ValueError) as e:
            raise WriteError(read.query_name, e) from e
        counts[fn] += 1
    return counts


def add_read_groups(
    specs,
    output="-",
    deleted_samples=(),
    region=None,
    compressed=True,
    threads=1,
):
    """Full run: merge inputs, fix the header, tag and write every read.

    Parameters
    ----------
    specs : list of SourceSpec
        Resolved input sources.
    output : str
        Output BAM path, ``"-"`` for stdout.
    deleted_samples : iterable of str
        Samples whose read groups are dropped from the output header.
    region : str or None
        Region expression restricting the reads written.
    compressed : bool
        Write compressed BAM (default) or level-0 BAM.
    threads : int
        BGZF threads for reading and writing.

    Returns
    -------
    collections.Counter
        Records written per filename.
    """
    log_sources(specs)
    read_groups = filename_to_read_group(specs)

    with open_sources([s.filename for s in specs], threads=threads) as reader:
        references = reader.references
        region_spec = parse_region(region, {name for name, _ in references})
        if region_spec is not None:
            if not reader.locate_indexes():
                raise ConfigurationError(
                    "could not load index data for all input BAM file(s)"
                )
            reader.set_region(*resolve_region(region_spec, references))

        header = merge_read_groups(reader.merged_header(), specs, deleted_samples)

        with open_writer(output, header, compressed=compressed,
                         threads=threads) as writer:
            counts = rewrite_read_groups(reader, writer, read_groups)

    print(
        f"[info] wrote {sum(counts.values()):,} alignments from "
        f"{len(read_groups):,} input file(s).",
        file=sys.stderr,
    )
    return counts
