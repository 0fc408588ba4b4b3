"""bamaddrg options — input groups, header edits, region and output mode."""

import argparse
import os

from bamaddrg.core.sources import BAM, READ_GROUP, SAMPLE


class _SourceOption(argparse.Action):
    """Record -b/-s/-r as ordered (kind, value) tokens in one list."""

    def __call__(self, parser, namespace, values, option_string=None):
        tokens = list(getattr(namespace, self.dest, None) or [])
        tokens.append((self.const, values))
        setattr(namespace, self.dest, tokens)


class _SingleUse(argparse.Action):
    """Store a value, refusing a second occurrence of the option."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is not None:
            parser.error(f"{option_string} may only be given once")
        setattr(namespace, self.dest, values)


def add_arguments(p):
    p.set_defaults(sources=[])
    p.add_argument(
        "-b", "--bam", dest="sources", action=_SourceOption, const=BAM,
        metavar="FILE",
        help="Use this BAM as input; starts a new input group (repeatable).",
    )
    p.add_argument(
        "-s", "--sample", dest="sources", action=_SourceOption, const=SAMPLE,
        metavar="NAME",
        help="Sample name for the current input group (default: file name).",
    )
    p.add_argument(
        "-r", "--read-group", dest="sources", action=_SourceOption,
        const=READ_GROUP, metavar="GROUP",
        help="Read group for the current input group (default: sample name).",
    )
    p.add_argument(
        "-d", "--delete", action="append", default=[], metavar="NAME",
        help="Remove read groups of this sample from the output header (repeatable).",
    )
    p.add_argument(
        "-R", "--region", action=_SingleUse, default=None, metavar="REGION",
        help="Only write alignments in REGION: NAME, NAME:POS, NAME:START.. "
             "or NAME:START..STOP (0-based, end-exclusive). Requires indexes.",
    )
    p.add_argument(
        "-u", "--uncompressed", action="store_true",
        help="Write uncompressed BAM.",
    )
    p.add_argument(
        "-t", "--threads", type=int, default=os.cpu_count(),
        help="BGZF threads for BAM read/write.",
    )
    p.add_argument(
        "--summary", default=None, metavar="FILE",
        help="Write per-input record counts to FILE (tab-separated).",
    )
    p.set_defaults(func=addrg_cmd)


def addrg_cmd(args):
    from bamaddrg.core.addrg import add_read_groups
    from bamaddrg.core.sources import resolve_sources

    specs = resolve_sources(args.sources)
    counts = add_read_groups(
        specs,
        output="-",
        deleted_samples=args.delete,
        region=args.region,
        compressed=not args.uncompressed,
        threads=args.threads or 1,
    )

    if args.summary:
        from bamaddrg.core.summary import summarize_counts, write_summary

        write_summary(summarize_counts(specs, counts), args.summary)
