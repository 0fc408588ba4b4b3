"""bamaddrg CLI entry point."""

import argparse
import sys

from bamaddrg import __version__

DESCRIPTION = """\
Merges the alignments in the supplied BAM files, using the supplied sample
names and read groups to add read group (RG) tags to each alignment. The
merged BAM is written to stdout.

Sample names and read groups apply to the input group opened by the nearest
-b option; a new -b starts the next group. When no sample name is supplied
the BAM file name is used, and when no read group is supplied the sample
name is used."""


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser():
    from bamaddrg.cli.cmd_addrg import add_arguments

    parser = _Parser(
        prog="bamaddrg",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    add_arguments(parser)
    return parser


def main(argv=None):
    from bamaddrg.core.errors import BamAddRgError

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.func(args)
    except BamAddRgError as e:
        print(f"[error] {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
