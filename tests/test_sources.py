import pytest

from bamaddrg.core.errors import ConfigurationError
from bamaddrg.core.sources import (
    BAM,
    READ_GROUP,
    SAMPLE,
    SourceSpec,
    filename_to_read_group,
    resolve_sources,
)


def test_filename_is_default_sample_and_read_group():
    specs = resolve_sources([(BAM, "a.bam")])
    assert specs == [SourceSpec("a.bam", "a.bam", "a.bam")]


def test_sample_is_default_read_group():
    specs = resolve_sources([(BAM, "a.bam"), (SAMPLE, "S1")])
    assert specs == [SourceSpec("a.bam", "S1", "S1")]


def test_explicit_sample_and_read_group():
    specs = resolve_sources([(BAM, "a.bam"), (SAMPLE, "S1"), (READ_GROUP, "RG1")])
    assert specs == [SourceSpec("a.bam", "S1", "RG1")]


def test_options_before_bam_apply_to_same_group():
    specs = resolve_sources([(READ_GROUP, "RG1"), (SAMPLE, "S1"), (BAM, "a.bam")])
    assert specs == [SourceSpec("a.bam", "S1", "RG1")]


def test_groups_do_not_leak_into_each_other():
    tokens = [
        (BAM, "a.bam"), (SAMPLE, "S1"), (READ_GROUP, "RG1"),
        (BAM, "b.bam"),
        (BAM, "c.bam"), (SAMPLE, "S3"),
    ]
    specs = resolve_sources(tokens)
    assert [s.filename for s in specs] == ["a.bam", "b.bam", "c.bam"]
    assert specs[1] == SourceSpec("b.bam", "b.bam", "b.bam")
    assert specs[2] == SourceSpec("c.bam", "S3", "S3")


def test_one_spec_per_bam_token_in_order():
    names = [f"f{i}.bam" for i in range(7)]
    specs = resolve_sources([(BAM, n) for n in names])
    assert [s.filename for s in specs] == names


def test_no_bam_is_configuration_error():
    with pytest.raises(ConfigurationError, match="no input files"):
        resolve_sources([])
    with pytest.raises(ConfigurationError):
        resolve_sources([(SAMPLE, "S1"), (READ_GROUP, "RG1")])


def test_empty_filename_is_rejected():
    with pytest.raises(ConfigurationError):
        resolve_sources([(BAM, "")])


def test_duplicate_filename_last_read_group_wins(capsys):
    specs = resolve_sources(
        [(BAM, "a.bam"), (READ_GROUP, "x"), (BAM, "a.bam"), (READ_GROUP, "y")]
    )
    assert len(specs) == 2
    assert filename_to_read_group(specs) == {"a.bam": "y"}
    assert "[warn]" in capsys.readouterr().err
