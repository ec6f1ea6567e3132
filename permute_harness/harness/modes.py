from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

MODE_N = "n"
MODE_C = "c"
MODE_W = "w"
MODE_H = "h"

# Labels of the source tensor, in the order of the case's lengths
SOURCE_MODES: Tuple[str, ...] = (MODE_N, MODE_C, MODE_W, MODE_H)


@dataclass(frozen=True)
class AxisMapping:
    modes_a: Tuple[str, ...]
    modes_b: Tuple[str, ...]
    extents_a: Tuple[int, ...]
    extents_b: Tuple[int, ...]

    @property
    def extent(self) -> Dict[str, int]:
        return dict(zip(self.modes_a, self.extents_a))


def map_axes(lengths: Sequence[int], permuted_dims: Sequence[int]) -> AxisMapping:
    """
    Derives mode labels and extents of source A and destination B.

    Mode k of B is mode permuted_dims[k] of A; extents follow the labels.
    permuted_dims is used as given: repeated entries produce repeated labels
    in B and an index past the last mode raises IndexError.
    """
    extent = {mode: length for mode, length in zip(SOURCE_MODES, lengths)}

    modes_a = SOURCE_MODES
    modes_b = tuple(modes_a[dim] for dim in permuted_dims)

    return AxisMapping(
        modes_a=modes_a,
        modes_b=modes_b,
        extents_a=tuple(extent[mode] for mode in modes_a),
        extents_b=tuple(extent[mode] for mode in modes_b),
    )
