"""Parse region strings such as ``chr1``, ``chr1:100`` or ``chr1:100..200``.

Coordinates are 0-based and ranges are half-open, so ``chr1:100..200``
covers positions 100 to 199.  A single position ``chr1:100`` is the
one-base range ``[100, 101)``.
"""

from dataclasses import dataclass
from typing import Optional

from bamaddrg.core.errors import ConfigurationError

TO_END = -1


@dataclass(frozen=True)
class RegionSpec:
    reference_name: str
    start: int = 0
    stop: int = TO_END


def _parse_position(text: str, region: str) -> int:
    cleaned = text.strip().replace(",", "")
    if not (cleaned.isascii() and cleaned.isdigit()):
        raise ConfigurationError(
            f"invalid coordinate {text!r} in region {region!r}"
        )
    return int(cleaned)


def parse_region(text: Optional[str], reference_names=()) -> Optional[RegionSpec]:
    """Parse a region expression; return None for an empty expression.

    Accepted forms::

        NAME                -> [0, end of NAME)
        NAME:POS            -> [POS, POS + 1)
        NAME:START..        -> [START, end of NAME)
        NAME:START..STOP    -> [START, STOP)

    Text that is itself one of ``reference_names`` is taken as a whole
    reference, so names containing ``:`` can still be selected.
    """
    if not text:
        return None
    if text in reference_names:
        return RegionSpec(reference_name=text)

    name, sep, coords = text.rpartition(":")
    if not sep:
        return RegionSpec(reference_name=text)
    if not name:
        raise ConfigurationError(f"missing reference name in region {text!r}")

    if ".." not in coords:
        pos = _parse_position(coords, text)
        return RegionSpec(reference_name=name, start=pos, stop=pos + 1)

    start_text, _, stop_text = coords.partition("..")
    start = _parse_position(start_text, text)
    if not stop_text.strip():
        return RegionSpec(reference_name=name, start=start)
    return RegionSpec(
        reference_name=name, start=start, stop=_parse_position(stop_text, text)
    )


def resolve_region(region: RegionSpec, references):
    """Resolve a region against the ordered ``(name, length)`` reference list.

    Returns ``(ref_index, start, stop)`` with the to-end sentinel replaced by
    the reference length.
    """
    ref_index = {name: i for i, (name, _) in enumerate(references)}
    if region.reference_name not in ref_index:
        raise ConfigurationError(
            f"unknown reference {region.reference_name!r} in region"
        )
    idx = ref_index[region.reference_name]
    length = references[idx][1]

    stop = length if region.stop == TO_END else region.stop
    if stop <= region.start:
        raise ConfigurationError(
            f"empty region {region.reference_name}:{region.start}..{stop}"
        )
    return idx, region.start, stop
