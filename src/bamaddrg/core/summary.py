"""Per-source record counts for a finished run."""

import pandas as pd


def summarize_counts(specs, counts):
    """Build a table of records written per input file.

    Parameters
    ----------
    specs : list of SourceSpec
        Resolved sources, in command-line order.
    counts : Mapping
        Records written, keyed by filename.

    Returns
    -------
    pandas.DataFrame
        Columns ``filename``, ``sample``, ``read_group``, ``records``.
    """
    rows = [
        {
            "filename": spec.filename,
            "sample": spec.sample,
            "read_group": spec.read_group,
            "records": int(counts.get(spec.filename, 0)),
        }
        for spec in specs
    ]
    return pd.DataFrame(
        rows, columns=["filename", "sample", "read_group", "records"]
    )


def write_summary(table, output_path):
    table.to_csv(output_path, sep="\t", index=False)
