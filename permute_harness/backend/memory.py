import math
from typing import Any, Dict, Optional, Sequence

import numpy as np
import torch

from ..ir.dtypes import DType, Backend
from ..config import DEBUG_EXECUTION, DEBUG_DETAILED, RANDOM_SEED

DEBUG = DEBUG_EXECUTION and DEBUG_DETAILED


class PermutationResource:
    """
    Host and device storage for one permutation case: tensor A (input),
    tensor B (engine output) and the reference output.

    Backing memory is kept as byte slabs and re-viewed with the element type
    of each case, so a case that fits in the current slabs reuses them.
    Only one case may use a resource at a time.
    """

    _instances: Dict[Backend, "PermutationResource"] = {}

    def __init__(self, backend: Backend = Backend.CPU_TORCH, seed: int = RANDOM_SEED):
        self.backend = backend
        self.device = backend.device
        self.seed = seed
        self.is_torch = backend != Backend.CPU_NUMPY
        self.reset()

    @classmethod
    def instance(cls, backend: Backend = Backend.CPU_TORCH) -> "PermutationResource":
        """Shared resource for a backend, reused across cases."""
        if backend not in cls._instances:
            cls._instances[backend] = cls(backend)
        return cls._instances[backend]

    def reset(self):
        self.capacity_bytes = 0
        self.element_count = 0
        self.dtype: Optional[DType] = None
        self.allocation_count = 0

        self._host_slabs: Dict[str, np.ndarray] = {}
        self._device_slabs: Dict[str, Any] = {}
        self._host_views: Dict[str, np.ndarray] = {}
        self._device_views: Dict[str, Any] = {}

    def _allocate(self, size_bytes: int):
        for name in ("a", "b", "reference"):
            self._host_slabs[name] = np.zeros(size_bytes, dtype=np.uint8)
            if self.is_torch:
                self._device_slabs[name] = torch.zeros(
                    size_bytes, dtype=torch.uint8, device=self.device
                )
            else:
                self._device_slabs[name] = np.zeros(size_bytes, dtype=np.uint8)
        self.capacity_bytes = size_bytes
        self.allocation_count += 1

        if DEBUG:
            print(f"[PermutationResource._allocate] 3 x {size_bytes} bytes on {self.device}")

    def _view(self, slab: Any, size_bytes: int, dtype: DType) -> Any:
        raw = slab[:size_bytes]
        if isinstance(raw, torch.Tensor):
            return raw.view(dtype.torch)
        return raw.view(dtype.numpy)

    def setup_storage(self, lengths: Sequence[int], dtype: DType):
        """
        Prepares storage for a tensor of the given extents and element type.
        Reuses the current slabs when they are large enough, otherwise
        reallocates. Tensor A is filled with seeded random values in [-1, 1)
        and uploaded to the device; B and the reference are zeroed.
        """
        count = math.prod(lengths)
        size_bytes = count * dtype.itemsize

        if size_bytes > self.capacity_bytes or not self._host_slabs:
            self._allocate(size_bytes)
        elif DEBUG:
            print(
                f"[PermutationResource.setup_storage] reusing {self.capacity_bytes} bytes "
                f"for {size_bytes}"
            )

        self.element_count = count
        self.dtype = dtype
        for name in ("a", "b", "reference"):
            self._host_views[name] = self._view(self._host_slabs[name], size_bytes, dtype)
            self._device_views[name] = self._view(
                self._device_slabs[name], size_bytes, dtype
            )

        rng = np.random.default_rng(self.seed)
        self._host_views["a"][:] = rng.uniform(-1.0, 1.0, count).astype(dtype.numpy)
        self._host_views["b"].fill(0)
        self._host_views["reference"].fill(0)

        self._copy_to_device("a")
        self._fill_device("b", 0)
        self._fill_device("reference", 0)

    def _copy_to_device(self, name: str):
        host = self._host_views[name]
        dev = self._device_views[name]
        if isinstance(dev, torch.Tensor):
            dev.copy_(torch.from_numpy(host))
        else:
            np.copyto(dev, host)

    def _fill_device(self, name: str, value):
        dev = self._device_views[name]
        if isinstance(dev, torch.Tensor):
            dev.fill_(value)
        else:
            dev.fill(value)

    def host_a(self) -> np.ndarray:
        return self._host_views["a"]

    def host_b(self) -> np.ndarray:
        return self._host_views["b"]

    def host_reference(self) -> np.ndarray:
        return self._host_views["reference"]

    def device_a(self) -> Any:
        return self._device_views["a"]

    def device_b(self) -> Any:
        return self._device_views["b"]

    def device_reference(self) -> Any:
        return self._device_views["reference"]

    def copy_b_to_host(self):
        """Blocking copy of the engine output; waits for pending device work."""
        dev = self._device_views["b"]
        if isinstance(dev, torch.Tensor):
            self._host_views["b"][:] = dev.cpu().numpy()
        else:
            np.copyto(self._host_views["b"], dev)

    def copy_reference_to_device(self):
        self._copy_to_device("reference")

    def current_element_count(self) -> int:
        return self.element_count

    def has_storage(self) -> bool:
        return bool(self._host_views)
