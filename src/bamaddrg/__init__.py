"""bamaddrg — merge BAM files and tag each alignment with a read group."""

__version__ = "0.1.0"
