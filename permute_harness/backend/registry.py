# permute_harness/backend/registry.py
from typing import Dict, List, Optional, Type, Union

import torch

from ..ir.dtypes import Backend, KernelUnavailableError
from .engine import PermuteEngine


class EngineRegistry:
    # Backend -> Engine class
    _engines: Dict[Backend, Type[PermuteEngine]] = {}

    @classmethod
    def get_all_engines(cls) -> Dict[Backend, Type[PermuteEngine]]:
        """Returns the entire engine registry."""
        return cls._engines

    @classmethod
    def register(cls, backend: Backend):
        def decorator(engine_cls):
            if backend in cls._engines:
                raise ValueError(
                    f"Engine registration error: backend '{backend.value}' already "
                    f"served by {cls._engines[backend].__name__}"
                )
            cls._engines[backend] = engine_cls
            return engine_cls

        return decorator

    @classmethod
    def has_engine(cls, backend: Backend) -> bool:
        engine_cls = cls._engines.get(backend)
        return engine_cls is not None and engine_cls.is_available()

    @classmethod
    def available_backends(cls) -> List[Backend]:
        return [b for b in cls._engines if cls.has_engine(b)]

    @staticmethod
    def default_backend() -> Backend:
        return Backend.GPU_TORCH if torch.cuda.is_available() else Backend.CPU_TORCH

    @classmethod
    def get_engine(
        cls, backend: Optional[Union[Backend, str]] = None
    ) -> PermuteEngine:
        if backend is None:
            backend = cls.default_backend()
        elif isinstance(backend, str):
            backend = Backend(backend)

        engine_cls = cls._engines.get(backend)
        if engine_cls is None:
            raise KernelUnavailableError(
                f"No permute engine registered for backend '{backend.value}'"
            )
        if not engine_cls.is_available():
            raise KernelUnavailableError(
                f"Permute engine for '{backend.value}' is not available on this machine"
            )
        return engine_cls()


from .kernels import *
