import platform
import importlib.metadata
from dataclasses import dataclass
from typing import Dict, Any

import psutil
import torch

from ..ir.dtypes import DType, Backend


@dataclass(frozen=True)
class DeviceCapabilities:
    """What the device behind a backend can run, and how much memory it has."""

    device: str
    f16: bool
    f32: bool
    f64: bool
    memory_bytes: int

    def supports(self, dtype: DType) -> bool:
        return {
            DType.FP16: self.f16,
            DType.FP32: self.f32,
            DType.FP64: self.f64,
        }[dtype]

    @classmethod
    def probe(cls, backend: Backend) -> "DeviceCapabilities":
        if backend != Backend.GPU_TORCH:
            return cls(
                device="cpu",
                f16=True,
                f32=True,
                f64=True,
                memory_bytes=psutil.virtual_memory().available,
            )

        if not torch.cuda.is_available():
            return cls(device="cuda", f16=False, f32=False, f64=False, memory_bytes=0)

        free_bytes, _ = torch.cuda.mem_get_info()
        major, minor = torch.cuda.get_device_capability()
        return cls(
            device="cuda",
            f16=(major, minor) >= (5, 3),
            f32=True,
            f64=True,
            memory_bytes=free_bytes,
        )


class EnvironmentSniffer:
    @staticmethod
    def get_hardware_name(backend: Backend) -> str:
        # Basic CPU info as fallback hardware name
        cpu_name = platform.processor() or "Unknown CPU"
        if backend == Backend.GPU_TORCH and torch.cuda.is_available():
            return torch.cuda.get_device_name(0)
        return cpu_name

    @staticmethod
    def get_platform_info() -> Dict[str, Any]:
        return {
            "os": platform.system(),
            "os_release": platform.release(),
            "machine": platform.machine(),
            "python_version": platform.python_version(),
        }

    @staticmethod
    def get_libs_info() -> Dict[str, Any]:
        libs = {}
        for lib in ["numpy", "torch", "permute_harness"]:
            try:
                libs[lib] = importlib.metadata.version(lib.replace("_", "-"))
            except importlib.metadata.PackageNotFoundError:
                libs[lib] = "not_installed"
        return libs

    @classmethod
    def sniff(cls, backend: Backend) -> Dict[str, Any]:
        return {
            "hardware_name": cls.get_hardware_name(backend),
            "capabilities": DeviceCapabilities.probe(backend),
            "platform_info": cls.get_platform_info(),
            "libs_info": cls.get_libs_info(),
        }
